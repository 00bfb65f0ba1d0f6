"""zcc hook commands."""
