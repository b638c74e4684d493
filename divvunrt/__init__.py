"""Pipeline definitions, CG3 stream helpers, console output and markdown debug reports."""

__version__ = "0.1.0"
__all__ = ["ast", "shell", "cg3", "report"]