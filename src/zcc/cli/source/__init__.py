"""zcc source commands."""
