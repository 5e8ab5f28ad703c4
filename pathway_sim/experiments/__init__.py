"""Batch perturbation runs driven by YAML configs."""
