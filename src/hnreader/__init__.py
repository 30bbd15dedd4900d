"""HN Reader: read/unread tracker for the HN Daily digest."""

__version__ = "0.1.0"
