"""Core infrastructure for canvas-relay."""
