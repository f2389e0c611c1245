"""Command-line interface for integrity-tool."""
