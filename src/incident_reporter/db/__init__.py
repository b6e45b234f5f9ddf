"""Database and Firebase handles."""
