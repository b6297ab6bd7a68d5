"""libhtdigest -- maintain Apache-style digest password files"""

from libhtdigest.commit import create_password_file, update_password_file
from libhtdigest.record import PasswordRecord, compute_digest, format_record, parse_record

__version__ = "1.0.0"

__all__ = [
    "PasswordRecord",
    "compute_digest",
    "create_password_file",
    "format_record",
    "parse_record",
    "update_password_file",
]
