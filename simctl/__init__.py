"""Fake Kubernetes fixtures for scheduler simulation and a create-only apply."""

__version__ = "0.1.0"
