"""Configuration, security, sessions and other application-wide plumbing."""
