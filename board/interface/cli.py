"""Command line entry point for maintenance jobs.

Usage:
    board-cli sync-user-comments --user-id <uuid>
    board-cli sync-user-posts <uuid>
    board-cli sync-user <uuid>

Exit codes: 0 when the run completed (rows that failed are logged and
reported as ``failed``), 1 when the run itself failed, for example on lost
storage, 2 on bad usage.
"""

import argparse
import asyncio
import sys
from typing import Sequence
from uuid import UUID

import logfire
from dishka import AsyncContainer

from board.application.usecase.projection import (
    ProjectionTarget,
    SyncUserRequest,
    SyncUserResponse,
    SyncUserUseCase,
)
from board.config import Settings
from board.domain.error import StorageUnavailableError
from board.util.di.container import create_cli_container
from board.util.logging import setup_logging
from board.util.observability import configure_logfire

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

COMMANDS: dict[str, list[ProjectionTarget]] = {
    "sync-user-comments": [ProjectionTarget.USER_COMMENTS],
    "sync-user-posts": [ProjectionTarget.USER_POSTS],
    "sync-user": [ProjectionTarget.USER_COMMENTS, ProjectionTarget.USER_POSTS],
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="board-cli", description="Board maintenance commands"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    helps = {
        "sync-user-comments": "Rebuild user_comments for one user",
        "sync-user-posts": "Rebuild user_posts for one user",
        "sync-user": "Rebuild both projection tables for one user",
    }
    for name, help_text in helps.items():
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("user_id", nargs="?", help="User UUID")
        sub.add_argument("--user-id", dest="user_id_option", help="User UUID")

    return parser


def print_report(response: SyncUserResponse) -> None:
    """Write the per-table counters to stdout."""
    for target, stats in response.results.items():
        print(f"{target.value}: sync completed for user {response.user_id}")
        for source, count in stats.found.items():
            print(f"  found {source}: {count}")
        print(f"  total found: {sum(stats.found.values())}")
        print(f"  created: {stats.created}")
        print(f"  updated: {stats.updated}")
        print(f"  soft deleted: {stats.soft_deleted}")
        print(f"  failed: {stats.failed}")


async def run(
    command: str, user_id: UUID, container: AsyncContainer
) -> int:
    """Run one sync command against a container and report the outcome.

    Args:
        command: One of ``COMMANDS``
        user_id: User to reconcile
        container: DI container providing ``SyncUserUseCase``

    Returns:
        Process exit code
    """
    request = SyncUserRequest(user_id=str(user_id), targets=COMMANDS[command])

    with logfire.span("cli.run", command=command, user_id=str(user_id)):
        try:
            async with container() as request_container:
                use_case = await request_container.get(SyncUserUseCase)
                response = await use_case.execute(request)
        except StorageUnavailableError as e:
            logfire.error("Storage unavailable, sync aborted", error=str(e))
            print(f"error: storage unavailable: {e}", file=sys.stderr)
            return EXIT_FAILED
        except Exception as e:
            logfire.exception("Sync failed", command=command, user_id=str(user_id))
            print(f"error: {command} failed: {e}", file=sys.stderr)
            return EXIT_FAILED

    print_report(response)
    if response.failed:
        logfire.warn(
            "Sync completed with failed rows",
            command=command,
            user_id=str(user_id),
            failed=response.failed,
        )
    return EXIT_OK


async def _run_with_container(command: str, user_id: UUID) -> int:
    container = create_cli_container()
    try:
        return await run(command, user_id, container)
    finally:
        await container.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments and run the requested command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    raw_user_id = args.user_id_option or args.user_id
    if not raw_user_id:
        print("error: a user id is required", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    try:
        user_id = UUID(raw_user_id)
    except ValueError:
        print(f"error: not a UUID: {raw_user_id}", file=sys.stderr)
        return EXIT_USAGE

    settings = Settings()
    configure_logfire(settings, service_name="board-cli")
    setup_logging(settings)

    return asyncio.run(_run_with_container(args.command, user_id))


if __name__ == "__main__":
    sys.exit(main())
