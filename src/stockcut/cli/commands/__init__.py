"""CLI command implementations for the stockcut application.

This package contains subcommands for the stockcut CLI, including:
- validate: Validate a workspace file
"""

from stockcut.cli.commands.validate import display_load_error, validate_command

__all__ = ["display_load_error", "validate_command"]
