"""In-memory signup/login service."""
