from __future__ import annotations

import os
from typing import TYPE_CHECKING, Callable

from libhtdigest.commit import TEMP_PREFIX

if TYPE_CHECKING:
    from os import PathLike


def secret_source(*secrets: str) -> Callable[[], str]:
    """return callable handing out *secrets* in order, failing once they run out"""
    pending = list(secrets)

    def read_secret() -> str:
        assert pending, "secret read more often than expected"
        return pending.pop(0)

    return read_secret


def leftover_temp_files(directory: str | PathLike[str]) -> list[str]:
    return [name for name in os.listdir(directory) if name.startswith(TEMP_PREFIX)]
