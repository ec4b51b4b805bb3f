"""Shared helpers: logging, text utilities and the generation collaborator."""
