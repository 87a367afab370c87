"""Simulation engine: paths, preprocessing and the sequential loop."""
