"""Service orchestration layer."""
