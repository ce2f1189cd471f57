"""Data models for settings and content."""
