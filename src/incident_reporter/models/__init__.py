"""Request and persistence models."""
