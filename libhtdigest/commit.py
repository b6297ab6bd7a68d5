"""libhtdigest.commit -- create or update a password file on disk

Changes are written to a temporary file placed next to the target,
which is then renamed over the target, so readers never observe a
partially written password file.
"""

from __future__ import annotations

import contextlib
import os
import stat
import tempfile
from typing import IO, TYPE_CHECKING, Callable

from libhtdigest._logging import logger
from libhtdigest.exc import FileOpenError
from libhtdigest.record import render_record
from libhtdigest.rewrite import rewrite_password_file
from libhtdigest.validation import check_field

if TYPE_CHECKING:
    from collections.abc import Iterator
    from os import PathLike

__all__ = [
    "DEFAULT_FILE_MODE",
    "atomic_writer",
    "create_password_file",
    "update_password_file",
]

#: permissions given to newly created password files
DEFAULT_FILE_MODE = 0o644

TEMP_PREFIX = "htdigest.tmp."


def _existing_mode(path: str | PathLike[str]) -> int | None:
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        return None


@contextlib.contextmanager
def atomic_writer(
    path: str | PathLike[str], mode: int | None = None
) -> Iterator[IO[bytes]]:
    """Context manager yielding a binary stream which replaces *path* on success.

    The stream writes to a temporary file in the same directory as *path*.
    When the block exits cleanly, the file is flushed, synced to disk, and
    renamed over *path*. If the block raises, *path* is left untouched.
    Either way, the temporary file is gone afterwards.

    :param mode:
        permissions for the resulting file. defaults to the mode of the
        existing file, or :data:`DEFAULT_FILE_MODE` if there isn't one.
    """
    # write through symlinks instead of replacing them
    path = os.path.realpath(path)
    if mode is None:
        mode = _existing_mode(path)
        if mode is None:
            mode = DEFAULT_FILE_MODE
    directory = os.path.dirname(path)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=TEMP_PREFIX)
    try:
        with os.fdopen(fd, "wb") as fh:
            yield fh
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
        logger.debug("committed %s -> %s", tmp_path, path)
    finally:
        with contextlib.suppress(FileNotFoundError):
            os.remove(tmp_path)
            logger.debug("removed temp file %s", tmp_path)


def create_password_file(
    path: str | PathLike[str],
    user: str,
    realm: str,
    read_secret: Callable[[], str],
    out: IO[str] | None = None,
) -> None:
    """Create (or truncate) *path*, holding only the record for user + realm.

    The secret is read and validated before the file is touched.

    :raises FileOpenError: if the file can't be created.
    :raises ValidationError: if user, realm, or secret are rejected.
    """
    check_field(user, "user")
    check_field(realm, "realm")
    if out is not None:
        out.write(f"Adding password for {user} in realm {realm}.\n")
    record = render_record(user, realm, read_secret())
    try:
        with atomic_writer(path) as fh:
            fh.write(record.encode("ascii") + b"\n")
    except OSError as err:
        raise FileOpenError(f"Could not open passwd file {path}: {err}") from err


def update_password_file(
    path: str | PathLike[str],
    user: str,
    realm: str,
    read_secret: Callable[[], str],
    out: IO[str] | None = None,
) -> bool:
    """Change the password for user + realm inside existing file *path*,
    adding a record if there isn't one.

    :raises FileOpenError: if *path* can't be opened for reading.
    :raises ValidationError: if user, realm, secret, or a record in the file is rejected.
    :raises OSError: if writing the new file fails.

    :returns:
        * ``True`` if an existing record was changed
        * ``False`` if a new record was added
    """
    # user & realm are validated by rewrite_password_file()
    try:
        source = open(path, "rb")
    except OSError as err:
        raise FileOpenError(
            f"Could not open passwd file {path} for reading.\n"
            "Use -c option to create new one."
        ) from err
    with source, atomic_writer(path) as dest:
        found = rewrite_password_file(source, dest, user, realm, read_secret, out=out)
        # source must be closed before it gets replaced
        source.close()
    return found
