"""KeyGuard - exposed credential scanner for web pages."""

from keyguard.version import __version__

__all__ = ["__version__"]
