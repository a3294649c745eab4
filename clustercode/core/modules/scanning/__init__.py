"""Transcode candidate discovery."""
