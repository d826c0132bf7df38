"""Local persistence: platform paths, the saved session token, settings."""
