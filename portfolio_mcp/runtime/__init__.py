"""Runtime response shaping and monitoring."""
