"""Infrastructure layer - adapters for HTTP, storage, configuration and environment."""
