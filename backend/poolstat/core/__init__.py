"""Core collection, rendering and polling logic."""
