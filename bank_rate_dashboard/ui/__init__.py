"""Dashboard UI."""
