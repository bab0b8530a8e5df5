"""Repository lookup, output filters, path removal, command capture and logging for TTP files."""

__version__ = "0.1.0"