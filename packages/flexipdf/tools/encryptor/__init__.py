"""Encryption tool plugins."""
