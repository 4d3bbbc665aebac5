"""camscan - scan a camera's storage for the files you want."""

__version__ = "0.1.0"
