"""Core - Configuration, logging and metrics shared by the client."""
