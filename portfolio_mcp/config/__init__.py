"""Environment and persisted configuration."""
