"""College events API: event CRUD, text search and image uploads."""

__version__ = "1.0.0"
