"""Keep nginx site configs in sync with labeled docker containers."""

__version__ = "0.3.0"
