"""Concrete hostile archetypes, one module per type."""
