"""ZipReel: two-tier cached movie search."""

__version__ = "1.0.0"
