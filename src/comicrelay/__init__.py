"""Comic Relay: provider relay and story storage for the comic generator."""

__version__ = "0.1.0"
