"""Infrastructure layer - logging, configuration and filesystem access."""
