"""Services wiring the rules engine to storage and messaging."""
