"""Core layer building."""
