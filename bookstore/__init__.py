"""Book catalogue service: a JSON or SQL backed store with cover uploads."""

__version__ = "1.0.0"
