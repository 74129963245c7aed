"""Git-compatible content addressing for local files.

A git blob id is SHA-1 over ``blob <size>\\0`` followed by the raw bytes.
Producing the same digest locally lets a file be checked against the remote
tree without downloading it.
"""

import hashlib
import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

_HASH_CHUNK_SIZE = 65536


def blob_hasher(size: int) -> "hashlib._Hash":
    """Return a SHA-1 hasher pre-loaded with the git blob header."""
    return hashlib.sha1(f"blob {size}\0".encode())


def git_blob_sha(content: bytes) -> str:
    """Compute the git blob id of an in-memory byte string."""
    h = blob_hasher(len(content))
    h.update(content)
    return h.hexdigest()


def hash_local_file(path: Union[str, Path]) -> str:
    """Compute the git blob id of a local file.

    The file is streamed in chunks; the size in the header is taken from
    ``stat`` so both must agree, which holds for files not being written to.

    Raises:
        OSError: If the file cannot be read
    """
    file_path = Path(path)
    size = file_path.stat().st_size
    h = blob_hasher(size)
    with open(file_path, "rb") as f:
        while True:
            chunk = f.read(_HASH_CHUNK_SIZE)
            if not chunk:
                break
            h.update(chunk)
    digest = h.hexdigest()
    logger.debug(f"Local blob hash {digest} for {file_path}")
    return digest
