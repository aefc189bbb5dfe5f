"""Notes module - the Note model and the corpus collaborators around it.

- models: Note, slug/tag normalisation, the ``is_hidden`` rule
- frontmatter: YAML front-matter parsing
- walk: note file discovery
- ignore: glob matching for ignore patterns
- corpus: direct corpus reads (listing, bookmarks)
"""

from inkdex.notes.corpus import iter_bookmarks, iter_notes
from inkdex.notes.frontmatter import ParsedMarkdown, parse_frontmatter
from inkdex.notes.ignore import is_path_ignored, matches_glob
from inkdex.notes.models import (
    Note,
    id_from_path,
    is_hidden,
    normalize_tag,
    normalize_tags,
    slugify,
)
from inkdex.notes.walk import walk_files

__all__ = [
    "Note",
    "ParsedMarkdown",
    "id_from_path",
    "is_hidden",
    "is_path_ignored",
    "iter_bookmarks",
    "iter_notes",
    "matches_glob",
    "normalize_tag",
    "normalize_tags",
    "parse_frontmatter",
    "slugify",
    "walk_files",
]
