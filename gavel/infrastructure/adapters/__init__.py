"""Adapters binding ports to concrete backends."""
