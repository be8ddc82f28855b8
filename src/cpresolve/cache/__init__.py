"""Resolution result caching."""
