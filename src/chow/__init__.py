"""Chow: community-driven discovery of nearby food joints."""

__version__ = "1.0.0"
