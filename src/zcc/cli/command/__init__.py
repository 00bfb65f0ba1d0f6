"""zcc command commands."""
