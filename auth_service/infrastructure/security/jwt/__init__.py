"""JWT verification."""
