"""Core helpers shared across blueprints."""
