"""Core domain layer - entities, services, interfaces, and exceptions."""
