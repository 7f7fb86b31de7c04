"""Factory Boy factories for in-memory domain objects."""
