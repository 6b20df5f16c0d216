"""Identity provider adapters."""
