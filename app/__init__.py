"""Coordinator HTTP service."""
