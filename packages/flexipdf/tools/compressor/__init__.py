"""Compression tool plugin."""
