"""Service interfaces."""
