"""Conversion tool plugins."""
