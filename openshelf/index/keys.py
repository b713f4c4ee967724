"""Folder key generation for the persisted index."""

import hashlib
from typing import AbstractSet

KEY_LENGTH = 12


def generate_folder_key(name: str, existing_keys: AbstractSet[str]) -> str:
    """
    Derive a stable key for a folder name that is not in ``existing_keys``.

    The key is the leading hex digits of the name's SHA-256 digest. On
    collision a ``-1``, ``-2``, ... suffix is appended until the key is
    unique. The caller must add the returned key to ``existing_keys``
    before the next call.

    Args:
        name: Raw folder name as listed on the remote storage.
        existing_keys: Keys already in use.

    Returns:
        A key not present in ``existing_keys``.
    """
    base = hashlib.sha256(name.encode("utf-8")).hexdigest()[:KEY_LENGTH]
    if base not in existing_keys:
        return base

    suffix = 1
    while f"{base}-{suffix}" in existing_keys:
        suffix += 1
    return f"{base}-{suffix}"
