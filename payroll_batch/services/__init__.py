"""Batch run services."""
