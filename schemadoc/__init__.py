"""Database schema model with filtering, repair and JSON/YAML serialisation."""

__version__ = "1.68.2"

__all__ = [
    "cardinality",
    "codec",
    "filtering",
    "formatting",
    "sample",
    "schema",
    "writers",
]