"""Command-line interface for btrpc."""
