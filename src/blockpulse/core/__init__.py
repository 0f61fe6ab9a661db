"""Core domain: models, errors, ports and the collector loop."""
