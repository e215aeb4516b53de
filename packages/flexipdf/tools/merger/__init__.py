"""Merge tool plugin."""
