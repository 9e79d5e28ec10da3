"""Batch entrypoints."""
