"""Core layer: configuration, domain, interfaces and shared utilities."""
