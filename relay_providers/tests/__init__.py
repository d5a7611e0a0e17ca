"""Tests for relay_providers."""
