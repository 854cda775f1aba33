"""Photo-to-panorama conversion and multi-image stitching engine."""

__version__ = "0.1.0"
