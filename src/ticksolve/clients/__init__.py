"""Gateways the client-side core uses to reach the API."""
