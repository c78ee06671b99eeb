#!/usr/bin/env python3
"""mergechunks CLI - inspect and resolve git conflict chunks."""

import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from mergechunks.command import (
    CheckCommand,
    FindCommand,
    ListCommand,
    ReplaceCommand,
    TakeCommand,
)
from mergechunks.core.config import State
from mergechunks.core.log import logger


class CliState(State):
    """Inspect and resolve git merge conflict chunks one at a time.

    Each conflict block in a file gets an ID, counted from 0 at the
    top of the file. IDs are recomputed whenever the file changes:
    resolve several chunks of one file from the highest ID down.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.chunks.context_lines 5)
    2. --include FILE and ./mergechunks.yaml
    3. User config in the platform config directory
    4. .env file and environment variables
       (MERGECHUNKS_CONFIG__CHUNKS__ENCODING=latin-1)
    """

    list: CliSubCommand[ListCommand]
    replace: CliSubCommand[ReplaceCommand]
    take: CliSubCommand[TakeCommand]
    check: CliSubCommand[CheckCommand]
    find: CliSubCommand[FindCommand]

    def cli_cmd(self):
        """Dispatch to the active subcommand, or show help."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        with self:
            exit_code = subcommand.run(self)
            session = self.runtime.session
            if session.chunks_replaced:
                logger.info(
                    f"Replaced {session.chunks_replaced} chunks",
                    files=session.files_touched,
                )
        raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
