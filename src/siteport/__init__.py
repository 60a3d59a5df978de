"""Site-export package verification and import summaries."""

__version__ = "0.1.0"
