"""Vendor adapter wire tests."""
