"""libhtdigest.record -- parse & render ``user:realm:digest`` records"""

from __future__ import annotations

import dataclasses
import hashlib
import hmac
from typing import TYPE_CHECKING, AnyStr

from libhtdigest.exc import MalformedRecordError
from libhtdigest.validation import check_field, check_printable_ascii

if TYPE_CHECKING:
    from typing_extensions import Self

__all__ = [
    "PasswordRecord",
    "compute_digest",
    "format_record",
    "parse_record",
    "render_record",
]

_COLON = ":"
_BCOLON = b":"


def compute_digest(user: str, realm: str, secret: str) -> str:
    """return hex-encoded md5 digest of ``user:realm:secret``"""
    data = f"{user}:{realm}:{secret}".encode("ascii")
    return hashlib.md5(data).hexdigest()


def format_record(user: str, realm: str, secret: str) -> str:
    """render password file line (without newline) for user + realm.

    :raises ValidationError:
        if any of the values contains a forbidden character,
        or user / realm is too long.
    """
    check_field(user, "user")
    check_field(realm, "realm")
    return render_record(user, realm, secret)


def render_record(user: str, realm: str, secret: str) -> str:
    """like :func:`format_record`, but only the secret is validated;
    callers must have run :func:`check_field` on user & realm already.
    """
    check_printable_ascii(secret, "password")
    return f"{user}:{realm}:{compute_digest(user, realm, secret)}"


def parse_record(line: AnyStr) -> tuple[AnyStr, AnyStr, AnyStr] | None:
    """split line (str or bytes, without newline) into ``(user, realm, rest)``.

    returns ``None`` if line has fewer than 3 colon-separated fields.
    any fields past the third are left inside ``rest``, unchanged.
    """
    sep = _BCOLON if isinstance(line, bytes) else _COLON
    fields = line.split(sep, 2)  # type: ignore[arg-type]
    if len(fields) < 3:
        return None
    user, realm, rest = fields
    return user, realm, rest


@dataclasses.dataclass(frozen=True)
class PasswordRecord:
    user: str
    realm: str
    digest: str

    @classmethod
    def from_secret(cls, user: str, realm: str, secret: str) -> Self:
        return cls.from_line(format_record(user, realm, secret))

    @classmethod
    def from_line(cls, line: str) -> Self:
        result = parse_record(line.rstrip("\r\n"))
        if result is None:
            raise MalformedRecordError(f"not a htdigest record: {line!r}")
        user, realm, digest = result
        return cls(user=user, realm=realm, digest=digest)

    def as_line(self) -> str:
        return f"{self.user}:{self.realm}:{self.digest}"

    def matches(self, secret: str) -> bool:
        """check if *secret* hashes to this record's digest"""
        check_printable_ascii(secret, "password")
        expected = compute_digest(self.user, self.realm, secret)
        return hmac.compare_digest(expected.encode("ascii"), self.digest.encode("utf-8"))
