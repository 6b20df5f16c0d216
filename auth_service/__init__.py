"""User management service backed by an external identity provider."""
