"""Registry, calldata encoding and action assembly."""
