"""Object storage clients."""
