"""Model contract and its SQLAlchemy implementation."""
