"""Structural metrics and before/after comparison of pathways."""
