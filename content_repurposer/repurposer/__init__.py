"""Content Repurposer: turn one piece of source content into platform-specific posts."""

__version__ = "0.1.0"
