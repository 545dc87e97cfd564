"""Domain logic: project store, reorder coordinator, config and logging utilities."""
