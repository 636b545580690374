"""Utility modules for profilefit."""
