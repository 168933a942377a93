"""Artifact schemas and output paths."""
