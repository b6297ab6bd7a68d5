"""libhtdigest.rewrite -- single pass update of a digest password file"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Callable

from libhtdigest._logging import logger
from libhtdigest.exc import FieldLengthError
from libhtdigest.record import parse_record, render_record
from libhtdigest.validation import MAX_FIELD_LEN, check_field

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["rewrite_password_file"]

_BHASH = b"#"
_BNEWLINE = b"\n"
_EOL_CHARS = b"\r\n"


def _emit_record(
    dest: IO[bytes], user: str, realm: str, read_secret: Callable[[], str]
) -> None:
    secret = read_secret()
    dest.write(render_record(user, realm, secret).encode("ascii") + _BNEWLINE)


def rewrite_password_file(
    source: Iterable[bytes],
    dest: IO[bytes],
    user: str,
    realm: str,
    read_secret: Callable[[], str],
    out: IO[str] | None = None,
) -> bool:
    """Copy *source* lines to *dest*, replacing or appending the record for user + realm.

    Lines are copied verbatim, line terminators included, except for the
    first record matching ``(user, realm)``: that one is replaced with a new
    record built from the secret returned by *read_secret*. If no record
    matches, the new record is appended to the end instead.

    :arg source: byte lines of the current file (e.g. a file opened in ``"rb"`` mode).
    :arg dest: binary stream the new contents are written to.
    :arg read_secret: called exactly once to obtain the new password.
    :arg out: optional text stream which receives status messages.

    :raises FieldLengthError:
        if a record in *source* has a user or realm longer than 255 bytes.
    :raises ValidationError:
        if user, realm, or the secret contain forbidden characters.

    :returns:
        * ``True`` if an existing record was changed
        * ``False`` if a new record was added
    """
    check_field(user, "user")
    check_field(realm, "realm")
    target = (user.encode("ascii"), realm.encode("ascii"))

    found = False
    last = b""
    for raw in source:
        last = raw
        line = raw.rstrip(_EOL_CHARS)
        # blank lines & comments are never parsed
        if not line or line.startswith(_BHASH):
            dest.write(raw)
            continue
        result = parse_record(line)
        if result is None:
            dest.write(raw)
            continue
        key = result[:2]
        if found:
            # NOTE: only the first entry is replaced, which matches htdigest source
            if key == target:
                logger.warning(
                    "record occurs multiple times in source file: %r", target
                )
            dest.write(raw)
            continue
        if len(key[0]) > MAX_FIELD_LEN or len(key[1]) > MAX_FIELD_LEN:
            raise FieldLengthError("line", MAX_FIELD_LEN)
        if key != target:
            dest.write(raw)
            continue
        if out is not None:
            out.write(f"Changing password for {user} in realm {realm}.\n")
        _emit_record(dest, user, realm, read_secret)
        found = True

    if not found:
        if out is not None:
            out.write(f"Adding password for {user} in realm {realm}.\n")
        if last and not last.endswith(_BNEWLINE):
            dest.write(_BNEWLINE)
        _emit_record(dest, user, realm, read_secret)
    return found
