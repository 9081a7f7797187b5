"""Request workflows behind the HTTP routes and the CLI."""
