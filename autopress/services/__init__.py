"""Batch generation and publishing services."""
