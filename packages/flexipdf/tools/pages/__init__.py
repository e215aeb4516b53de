"""Rotate and crop tool plugins."""
