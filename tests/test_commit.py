from __future__ import annotations

import os
import stat
from typing import TYPE_CHECKING

import pytest

from libhtdigest import commit, record, rewrite
from libhtdigest.commit import (
    DEFAULT_FILE_MODE,
    atomic_writer,
    create_password_file,
    update_password_file,
)
from libhtdigest.exc import (
    FieldLengthError,
    FileOpenError,
    InvalidCharacterError,
    SecretInputError,
)
from libhtdigest.record import format_record
from libhtdigest.validation import check_field
from tests.utils_ import leftover_temp_files, secret_source

if TYPE_CHECKING:
    from pathlib import Path

SAMPLE_01 = (
    b"user2:realm:549d2a5f4659ab39a80dac99e159ab19\n"
    b"# comment\n"
    b"user1:realm:2a6cf53e7d8f8cf39d946dc880b14128\n"
)


@pytest.fixture
def password_file_path(tmp_path: Path) -> Path:
    return tmp_path.joinpath("file")


@pytest.fixture
def sample_file(password_file_path: Path) -> Path:
    password_file_path.write_bytes(SAMPLE_01)
    return password_file_path


def _fail_secret() -> str:
    raise SecretInputError("detect EOF of reader while reading line")


def test_atomic_writer_replaces_file(sample_file: Path) -> None:
    with atomic_writer(sample_file) as fh:
        fh.write(b"new contents\n")
        # target untouched until block exits
        assert sample_file.read_bytes() == SAMPLE_01
    assert sample_file.read_bytes() == b"new contents\n"
    assert leftover_temp_files(sample_file.parent) == []


def test_atomic_writer_error_keeps_file(sample_file: Path) -> None:
    with pytest.raises(RuntimeError):
        with atomic_writer(sample_file) as fh:
            fh.write(b"partial")
            raise RuntimeError("boom")
    assert sample_file.read_bytes() == SAMPLE_01
    assert leftover_temp_files(sample_file.parent) == []


def test_atomic_writer_modes(sample_file: Path, password_file_path: Path) -> None:
    os.chmod(sample_file, 0o600)
    with atomic_writer(sample_file) as fh:
        fh.write(b"x\n")
    assert stat.S_IMODE(os.stat(sample_file).st_mode) == 0o600

    new_path = password_file_path.with_name("new")
    with atomic_writer(new_path) as fh:
        fh.write(b"x\n")
    assert stat.S_IMODE(os.stat(new_path).st_mode) == DEFAULT_FILE_MODE


def test_create_new_file(password_file_path: Path) -> None:
    create_password_file(password_file_path, "alice", "myrealm", secret_source("s3cr3t"))
    assert password_file_path.read_text() == (
        format_record("alice", "myrealm", "s3cr3t") + "\n"
    )


def test_create_truncates_existing(sample_file: Path) -> None:
    create_password_file(sample_file, "user5", "realm", secret_source("pass5"))
    assert sample_file.read_bytes() == b"user5:realm:03c55fdc6bf71552356ad401bdb9af19\n"


def test_create_in_missing_directory(tmp_path: Path) -> None:
    path = tmp_path / "missing" / "file"
    with pytest.raises(FileOpenError, match="Could not open passwd file"):
        create_password_file(path, "user1", "realm", secret_source("pass1"))
    assert not path.parent.exists()


def test_create_secret_eof_keeps_file(sample_file: Path) -> None:
    with pytest.raises(SecretInputError):
        create_password_file(sample_file, "user1", "realm", _fail_secret)
    assert sample_file.read_bytes() == SAMPLE_01


def test_update_changes_record(sample_file: Path) -> None:
    assert update_password_file(sample_file, "user2", "realm", secret_source("pass2x"))
    assert sample_file.read_bytes() == (
        b"user2:realm:5ba6d8328943c23c64b50f8b29566059\n"
        b"# comment\n"
        b"user1:realm:2a6cf53e7d8f8cf39d946dc880b14128\n"
    )
    assert leftover_temp_files(sample_file.parent) == []


def test_update_adds_record(sample_file: Path) -> None:
    assert not update_password_file(
        sample_file, "user5", "realm", secret_source("pass5")
    )
    assert sample_file.read_bytes() == (
        SAMPLE_01 + b"user5:realm:03c55fdc6bf71552356ad401bdb9af19\n"
    )


def test_update_empty_file(password_file_path: Path) -> None:
    password_file_path.touch()
    update_password_file(password_file_path, "alice", "myrealm", secret_source("s3cr3t"))
    assert password_file_path.read_text() == (
        format_record("alice", "myrealm", "s3cr3t") + "\n"
    )


def test_update_missing_file(password_file_path: Path) -> None:
    with pytest.raises(FileOpenError, match="Use -c option to create new one"):
        update_password_file(password_file_path, "user1", "realm", secret_source())
    assert not password_file_path.exists()


def test_update_long_field_keeps_file(password_file_path: Path) -> None:
    data = b"a" * 256 + b":realm:hash\n"
    password_file_path.write_bytes(data)
    with pytest.raises(FieldLengthError):
        update_password_file(password_file_path, "user1", "realm", secret_source("x"))
    assert password_file_path.read_bytes() == data
    assert leftover_temp_files(password_file_path.parent) == []


@pytest.mark.parametrize(
    ("user", "realm", "secret"),
    [
        ("us\x01er", "realm", "pass"),
        ("user", "realm\x7f", "pass"),
        ("user1", "realm", "p\xe4ss"),
    ],
)
def test_update_invalid_characters_keep_file(
    sample_file: Path, user: str, realm: str, secret: str
) -> None:
    with pytest.raises(InvalidCharacterError):
        update_password_file(sample_file, user, realm, secret_source(secret))
    assert sample_file.read_bytes() == SAMPLE_01
    assert leftover_temp_files(sample_file.parent) == []


def test_update_secret_eof_keeps_file(sample_file: Path) -> None:
    with pytest.raises(SecretInputError):
        update_password_file(sample_file, "user1", "realm", _fail_secret)
    assert sample_file.read_bytes() == SAMPLE_01
    assert leftover_temp_files(sample_file.parent) == []


def test_update_preserves_mode(sample_file: Path) -> None:
    os.chmod(sample_file, 0o640)
    update_password_file(sample_file, "user1", "realm", secret_source("pass1"))
    assert stat.S_IMODE(os.stat(sample_file).st_mode) == 0o640


def test_update_through_symlink(sample_file: Path, tmp_path: Path) -> None:
    link = tmp_path / "link"
    link.symlink_to(sample_file)
    update_password_file(link, "user5", "realm", secret_source("pass5"))
    assert link.is_symlink()
    assert sample_file.read_bytes() == (
        SAMPLE_01 + b"user5:realm:03c55fdc6bf71552356ad401bdb9af19\n"
    )
    assert leftover_temp_files(tmp_path) == []


def test_create_through_symlink(sample_file: Path, tmp_path: Path) -> None:
    link = tmp_path / "link"
    link.symlink_to(sample_file)
    create_password_file(link, "user5", "realm", secret_source("pass5"))
    assert link.is_symlink()
    assert sample_file.read_bytes() == b"user5:realm:03c55fdc6bf71552356ad401bdb9af19\n"


def test_update_validates_fields_once(
    sample_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls = []

    def counting_check_field(value: str, param: str = "field") -> str:
        calls.append(param)
        return check_field(value, param)

    for module in (commit, rewrite, record):
        monkeypatch.setattr(module, "check_field", counting_check_field)

    update_password_file(sample_file, "user1", "realm", secret_source("pass1"))
    assert calls == ["user", "realm"]

    calls.clear()
    create_password_file(sample_file, "user1", "realm", secret_source("pass1"))
    assert calls == ["user", "realm"]
