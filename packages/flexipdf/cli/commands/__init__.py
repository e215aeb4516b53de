"""Subcommand definitions for the ``flexipdf`` CLI."""
