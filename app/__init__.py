"""Resume review API application."""
