"""Domain layer: record model, ports and the reconciliation pipeline."""
