"""Collaborator-facing services: listing, summaries and export."""
