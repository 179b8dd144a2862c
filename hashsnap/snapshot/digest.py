"""File digests and the reusable streaming hasher that produces them."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from pathlib import Path

import blake3

DEFAULT_ALGORITHM = "blake3"
DEFAULT_CHUNK_SIZE = 64 * 1024

SUPPORTED_ALGORITHMS = ("blake3", "sha256", "sha384", "sha512", "sha3_256", "blake2b")

_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})*")


class DigestDecodeError(ValueError):
    """Raised when text cannot be decoded into a FileDigest."""

    def __init__(self, text: object, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"invalid digest {text!r}: {reason}")


class StreamingHasher:
    """A digest accumulator that can be reused across many files.

    ``finalize_reset`` hands back the finished digest and leaves the hasher
    in a fresh state, ready for the next file.
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported algorithm '{algorithm}': "
                f"expected one of {', '.join(SUPPORTED_ALGORITHMS)}"
            )
        self.algorithm = algorithm
        self._state = self._new()

    def _new(self):
        if self.algorithm == "blake3":
            return blake3.blake3()
        return hashlib.new(self.algorithm)

    @property
    def digest_size(self) -> int:
        return self._state.digest_size

    def update(self, chunk: bytes) -> None:
        self._state.update(chunk)

    def reset(self) -> None:
        self._state = self._new()

    def finalize_reset(self) -> bytes:
        value = self._state.digest()
        self.reset()
        return value


@dataclass(frozen=True, order=True)
class FileDigest:
    """Fixed-length digest of one file's contents.

    Compares and sorts byte-wise; serializes as lowercase hex.
    """

    value: bytes

    def __str__(self) -> str:
        return self.to_hex()

    def to_hex(self) -> str:
        return self.value.hex()

    @classmethod
    def from_hex(cls, text: object) -> FileDigest:
        """Decode a hex string, raising DigestDecodeError on malformed input."""
        if not isinstance(text, str):
            raise DigestDecodeError(text, f"expected a string, got {type(text).__name__}")
        if len(text) % 2:
            raise DigestDecodeError(text, "odd number of hex digits")
        if not _HEX_RE.fullmatch(text):
            raise DigestDecodeError(text, "contains non-hex characters")
        return cls(bytes.fromhex(text))

    @classmethod
    def from_file(
        cls,
        path: Path,
        hasher: StreamingHasher,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> FileDigest:
        """Stream *path* through *hasher* and return the finished digest.

        Raises OSError if the file cannot be opened or a read fails. The
        hasher is reset either way.
        """
        try:
            with open(path, "rb") as f:
                while chunk := f.read(chunk_size):
                    hasher.update(chunk)
        except OSError:
            hasher.reset()
            raise
        return cls(hasher.finalize_reset())


def compute_file_digest(path: Path, algorithm: str = DEFAULT_ALGORITHM) -> FileDigest:
    """Hash a single file with a throwaway hasher."""
    return FileDigest.from_file(path, StreamingHasher(algorithm))
