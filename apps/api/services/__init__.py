"""Service layer: ledger, billing operations, pipeline rules and rollups."""
