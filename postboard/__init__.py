"""Postboard: posts, comments and likes behind JWT authentication."""

__version__ = "0.1.0"
