"""Adapters connecting the core to HTTP, SQLite and logging."""
