"""Implementations of release-engine commands."""
