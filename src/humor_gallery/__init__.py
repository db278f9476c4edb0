"""Humor Gallery: captioned-image gallery with caption voting."""

__version__ = "0.1.0"
