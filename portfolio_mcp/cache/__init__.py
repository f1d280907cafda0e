"""In-memory caching."""
