"""Configuration and path resolution for hostpin."""
