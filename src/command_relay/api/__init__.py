"""HTTP transport for Command Relay."""
