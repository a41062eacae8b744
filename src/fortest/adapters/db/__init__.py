"""SQLAlchemy plumbing shared by the persistence adapters."""
