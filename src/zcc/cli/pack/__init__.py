"""zcc pack commands."""
