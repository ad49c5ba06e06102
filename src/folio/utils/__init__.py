"""Shared helpers for folio."""
