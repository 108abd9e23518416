"""Generic REST controllers over SQLAlchemy models."""
