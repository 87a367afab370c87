"""Spatial domains, hard data tables and data-to-domain mappings."""
