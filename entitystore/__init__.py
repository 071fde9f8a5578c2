"""entitystore: user and product CRUD over HTTP with cache-aside reads and JWT sessions."""

__version__ = "1.0.0"
