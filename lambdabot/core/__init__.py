"""Application wiring: the dependency-injection container."""
