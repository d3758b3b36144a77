"""recsplit: split record-structured files into balanced pieces."""

__version__ = "0.1.0"
