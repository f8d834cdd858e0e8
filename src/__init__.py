"""Epi Analytics core packages."""
