"""Audit review use cases."""
