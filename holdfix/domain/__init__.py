"""Domain layer: models, events and services."""
