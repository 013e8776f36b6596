"""CLI commands for shelldoc."""
