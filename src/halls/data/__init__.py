"""Packaged data files: default settings and their JSON schema."""
