"""Command groups for the ``ditto`` CLI."""
