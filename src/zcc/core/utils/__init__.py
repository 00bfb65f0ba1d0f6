"""Shared utilities for zcc (I/O, paths, subprocess, time)."""
