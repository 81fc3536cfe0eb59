"""daybook: daily, scheduled and reminder tasks kept in JSON files."""

__version__ = "0.1.0"
