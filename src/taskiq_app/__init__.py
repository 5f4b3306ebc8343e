"""Background task runtime."""
