"""Watermark, stamp and sign tool plugins."""
