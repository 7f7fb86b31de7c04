"""Mock data generation for the in-memory store."""
