"""Bundled fallback copy of the provider font list."""
