"""Staged page generation tools backed by a remote generation service."""

__version__ = "1.0.0"
