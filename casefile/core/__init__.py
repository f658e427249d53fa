"""Core application primitives."""
