"""Security adapters."""
