"""Output artifacts of a simulation run."""
