"""Command line interface module."""
