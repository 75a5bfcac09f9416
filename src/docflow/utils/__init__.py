"""Shared utilities for docflow."""
