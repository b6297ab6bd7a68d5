"""libhtdigest.validation -- checks applied to user, realm & secret values"""

from __future__ import annotations

from libhtdigest.exc import FieldLengthError, InvalidCharacterError

__all__ = [
    "MAX_STRING_LEN",
    "MAX_FIELD_LEN",
    "check_printable_ascii",
    "check_field",
]

#: size of the field buffer used by apache's htdigest
MAX_STRING_LEN = 256

#: longest user / realm accepted, in bytes
MAX_FIELD_LEN = MAX_STRING_LEN - 1

_MIN_PRINTABLE = 0x20
_MAX_PRINTABLE = 0x7E


def is_printable_ascii(text: str) -> bool:
    """Test if string contains only printable 7-bit ascii (0x20-0x7E)"""
    return all(_MIN_PRINTABLE <= ord(c) <= _MAX_PRINTABLE for c in text)


def check_printable_ascii(text: str, param: str = "value") -> str:
    """
    :raises InvalidCharacterError:
        if *text* contains any character outside printable 7-bit ascii.
    :returns: *text* unchanged
    """
    if not is_printable_ascii(text):
        raise InvalidCharacterError(param)
    return text


def check_field(value: str, param: str = "field") -> str:
    """validate a user or realm field.

    :raises InvalidCharacterError:
        if value isn't printable ascii, or contains the ``:`` separator.
    :raises FieldLengthError:
        if value is longer than :data:`MAX_FIELD_LEN` bytes.
    :returns: *value* unchanged
    """
    check_printable_ascii(value, param)
    if ":" in value:
        raise InvalidCharacterError(param, reason="the ':' separator")
    # printable ascii, so one byte per char
    if len(value) > MAX_FIELD_LEN:
        raise FieldLengthError(param, MAX_FIELD_LEN)
    return value
