"""Infrastructure: in-memory stubs, PostgreSQL adapters, observability."""
