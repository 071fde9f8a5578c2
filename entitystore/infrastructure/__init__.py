"""Infrastructure layer: cache, persistence and security adapters."""
