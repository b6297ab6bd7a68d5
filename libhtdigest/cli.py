"""libhtdigest.cli -- ``htdigest [-c] passwordfile realm username``"""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
from typing import IO, TYPE_CHECKING, NoReturn

from libhtdigest._logging import logger
from libhtdigest._utils.lines import secret_reader
from libhtdigest.commit import create_password_file, update_password_file
from libhtdigest.exc import HtdigestError, UsageError

if TYPE_CHECKING:
    from collections.abc import Sequence

LOG_LEVEL_ENV = "HTDIGEST_LOG_LEVEL"

PROG = "htdigest"
USAGE = "%(prog)s [-c] passwordfile realm username"
USAGE_EPILOG = "The -c flag creates a new file."

_OPT_CREATE = "-c"


@dataclasses.dataclass(frozen=True)
class Arguments:
    passwordfile: str
    realm: str
    username: str
    create: bool = False


def parse_args(argv: Sequence[str]) -> Arguments:
    """parse command arguments by position.

    ``-c`` is only recognized as the first of four arguments; realm and
    username may start with ``-``, so nothing else is treated as an option.

    :raises UsageError: for any other argument count or layout.
    """
    args = list(argv)
    if len(args) == 4:
        if args[0] != _OPT_CREATE:
            raise UsageError(f"unrecognized option: {args[0]!r}")
        return Arguments(*args[1:], create=True)
    if len(args) == 3:
        return Arguments(*args)
    raise UsageError(f"expected 3 or 4 arguments, got {len(args)}")


def _configure_logging(stream: IO[str]) -> None:
    name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    # getLevelName() returns a string for names it doesn't know
    level = logging.getLevelName(name)
    known = isinstance(level, int)
    logging.basicConfig(
        level=level if known else logging.WARNING,
        stream=stream,
        format="%(name)s: %(levelname)s: %(message)s",
    )
    if not known:
        logger.warning("unknown %s value %r, using WARNING", LOG_LEVEL_ENV, name)


def main(
    argv: Sequence[str] | None = None,
    stdin: IO[str] | None = None,
    stderr: IO[str] | None = None,
) -> int:
    """run command, returning process exit status"""
    if argv is None:
        argv = sys.argv[1:]
    if stdin is None:
        stdin = sys.stdin
    if stderr is None:
        stderr = sys.stderr
    _configure_logging(stderr)

    try:
        args = parse_args(argv)
    except UsageError:
        stderr.write("Usage: " + USAGE % {"prog": PROG} + "\n")
        stderr.write(f"{USAGE_EPILOG}\n")
        return 1

    read_secret = secret_reader(stdin)
    try:
        if args.create:
            create_password_file(
                args.passwordfile, args.username, args.realm, read_secret, out=stderr
            )
        else:
            update_password_file(
                args.passwordfile, args.username, args.realm, read_secret, out=stderr
            )
    except (HtdigestError, OSError) as err:
        stderr.write(f"{err}\n")
        return 1
    return 0


def run() -> NoReturn:
    """console script entry point"""
    sys.exit(main())
