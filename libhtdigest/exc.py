"""libhtdigest.exc -- exceptions raised by libhtdigest"""

from __future__ import annotations


class HtdigestError(Exception):
    """base class for all errors raised by libhtdigest"""


class UsageError(HtdigestError):
    """raised by the command front end when called with bad arguments"""


class FileOpenError(HtdigestError, OSError):
    """error raised when the password file can't be opened for reading,
    or the target file can't be created.
    """


class ValidationError(HtdigestError, ValueError):
    """base class for rejected user, realm or secret values"""


class InvalidCharacterError(ValidationError):
    """value contains a character outside printable 7-bit ascii,
    or a ``:`` inside a user / realm field.
    """

    def __init__(self, param: str, reason: str = "non ASCII or non Printable(0x20-0x7E)") -> None:
        self.param = param
        super().__init__(f"{param} includes {reason} character")


class FieldLengthError(ValidationError):
    """user or realm field is longer than the allowed maximum"""

    def __init__(self, param: str, max_size: int) -> None:
        self.param = param
        self.max_size = max_size
        super().__init__(
            f"the {param} contains a string longer than the allowed maximum size ({max_size})"
        )


class MalformedRecordError(ValidationError):
    """line can't be parsed as a ``user:realm:digest`` record"""


class SecretInputError(HtdigestError, EOFError):
    """secret line couldn't be read from the input stream"""
