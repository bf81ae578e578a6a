"""URL shortener with optional password-protected links."""

__version__ = "1.0.0"
