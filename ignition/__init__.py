"""Ignition: first-run setup API."""
