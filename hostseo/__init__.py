"""Automated SEO article production for a web hosting blog."""

__version__ = "2.0.0"
