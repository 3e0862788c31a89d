"""Buzza backend: program release metadata and user activity API."""

__version__ = "0.1.0"
