"""Startup configuration checks and logging setup."""
