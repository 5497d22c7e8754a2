"""Validating proxy for upstream chat completion APIs."""

__version__ = "1.0.0"
