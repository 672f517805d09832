"""Chain and metadata clients."""
