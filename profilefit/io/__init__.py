"""Input/output for configuration files and profile data."""
