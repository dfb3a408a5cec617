"""Infrastructure: database wiring and repository implementations."""
