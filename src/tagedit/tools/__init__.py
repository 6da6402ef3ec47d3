"""Interactive helper tools."""
