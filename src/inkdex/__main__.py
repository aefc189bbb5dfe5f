"""``python -m inkdex`` - used by the background index refresh."""

from inkdex.cli.main import cli

if __name__ == "__main__":
    cli()
