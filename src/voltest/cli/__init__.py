"""Command line interface for voltest."""
