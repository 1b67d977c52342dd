"""Flet desktop client."""
