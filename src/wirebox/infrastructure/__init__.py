"""Infrastructure layer: the container engine and logging."""
