"""Info screen server: image catalog, slideshow assets and live update channels."""

__version__ = "1.0.0"
