"""Core utilities: identifier codec, configuration, logging."""
