"""Filesystem access."""
