"""Domain models, persistence and the disconnect and analytics flows."""
