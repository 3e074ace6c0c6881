"""Permission administration use cases."""
