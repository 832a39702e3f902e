"""Build deduplicated link lists and link previews from chat exports."""

__version__ = "0.1.0"
