"""Infrastructure - HTTP access to the Pezesha API."""
