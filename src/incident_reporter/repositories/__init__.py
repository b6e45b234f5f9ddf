"""Persistence interfaces for submissions."""
