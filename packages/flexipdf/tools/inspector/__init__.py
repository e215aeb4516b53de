"""Metadata and text tool plugins."""
