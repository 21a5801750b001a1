"""Configuration and properties file loading."""
