"""Bundled word database."""
