"""Point schema and validation."""
