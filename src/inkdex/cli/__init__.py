"""CLI module - the ``ink`` command."""
