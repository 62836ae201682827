"""Splitwise API client, payload schemas and HTTP routes."""
