"""Feature modules built on the core framework."""
