"""Command-line interface for coursequiz."""
