"""JSON API surface."""
