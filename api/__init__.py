"""Epi Analytics REST API."""
