"""Command Relay - control plane for agents that poll for their commands."""

__version__ = "1.0.0"
