"""Command line interface for the Ditto client."""
