"""CLI commands for automodel-cli."""
