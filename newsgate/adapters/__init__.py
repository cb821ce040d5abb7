"""Clients for third-party collaborators."""
