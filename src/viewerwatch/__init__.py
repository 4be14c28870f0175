"""viewerwatch: livestream viewer-count monitoring API."""

__version__ = "0.1.0"
