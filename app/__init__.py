"""Hojas de Vida API."""
