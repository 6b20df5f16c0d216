"""Test suite for the auth service."""
