"""HTTP clients for feeds, generation and the content repository."""
