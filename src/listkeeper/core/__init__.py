"""Core configuration for Listkeeper."""
