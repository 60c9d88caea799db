"""Schema migration, aggregation and export services."""
