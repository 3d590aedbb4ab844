"""Scene data model."""
