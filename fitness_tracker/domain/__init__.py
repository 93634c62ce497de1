"""Activity and goal domain: entities, validation and services."""
