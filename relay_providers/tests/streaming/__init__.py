"""Streaming contract tests."""
