"""Service layer: command-line entry points built on the pipe."""
