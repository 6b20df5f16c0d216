"""Factories selecting infrastructure implementations."""
