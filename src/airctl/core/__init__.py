"""Core infrastructure: logging, events and raw input handling."""
