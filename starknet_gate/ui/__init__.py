"""Discord UI components."""
