"""Configuration schemas, loading and environment settings."""
