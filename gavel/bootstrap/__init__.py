"""Dependency wiring for Gavel."""
