"""Domain - Request schemas and client exceptions."""
