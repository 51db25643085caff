"""Command-line interface for ffl-standings."""
