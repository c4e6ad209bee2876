"""
devserve - local static file server for development

Serves one or more root directories over HTTP or HTTPS with byte-range
support and single-page-application fallback routing.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
