"""Product image gallery: ordering engine API and interactive gallery client."""

__version__ = "0.1.0"
