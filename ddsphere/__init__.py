"""DD Sphere SEO backend."""

__version__ = "0.3.0"
