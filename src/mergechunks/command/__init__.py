"""CLI command modules for mergechunks."""

from mergechunks.command.edit import ReplaceCommand, TakeCommand
from mergechunks.command.inspect import CheckCommand, FindCommand, ListCommand

__all__ = [
    "CheckCommand",
    "FindCommand",
    "ListCommand",
    "ReplaceCommand",
    "TakeCommand",
]
