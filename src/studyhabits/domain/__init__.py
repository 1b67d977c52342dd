"""Storage-agnostic interfaces consumed by the services."""
