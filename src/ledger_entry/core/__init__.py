"""Core types, exceptions, and request field access."""
