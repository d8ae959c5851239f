"""Virtual file system with in-memory and local-disk backends sharing one file and location interface."""

__version__ = "0.1.0"