"""viewbind: keeps generated view classes in sync with object templates."""

__version__ = "0.1.0"
