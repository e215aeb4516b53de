"""Command line interface for the FlexiPDF toolkit."""
