"""Shared helpers: logging, errors, security, clocks and HTTP events."""
