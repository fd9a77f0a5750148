"""HR Compliance — document expiry tracking for employee compliance records."""

__version__ = "1.0.0"
