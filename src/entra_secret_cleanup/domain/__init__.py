"""Domain layer - Credential classification rules and run results."""
