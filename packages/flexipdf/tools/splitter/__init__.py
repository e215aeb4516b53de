"""Split and extract tool plugins."""
