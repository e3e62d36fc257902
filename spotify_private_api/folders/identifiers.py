"""
Folder identifier generation.

New folders are named by a 16-character identifier drawn from a
hexadecimal alphabet. The identifier must not collide with anything
already visible in the root list, nor with identifiers minted earlier
in the same editing session that have not reached the server yet.

Usage:
    from spotify_private_api.folders.identifiers import FolderIdAllocator

    allocator = FolderIdAllocator(uri for uri in root_list_uris)
    first = allocator.allocate()
    second = allocator.allocate()  # never equal to first
"""

import secrets
from typing import Iterable, Protocol

from spotify_private_api.core.exceptions import IdentifierSpaceExhaustedError
from spotify_private_api.core.logger import get_logger

logger = get_logger(__name__)


FOLDER_ID_LENGTH = 16
FOLDER_ID_ALPHABET = "abcdef1234567890"

# 16^16 candidates; hitting this cap means `existing` or the random source is degenerate
DEFAULT_MAX_ATTEMPTS = 1000


class RandomSource(Protocol):
    def choice(self, seq: str) -> str: ...


_system_random = secrets.SystemRandom()


def generate_folder_id(
    existing: Iterable[str] = (),
    *,
    rng: RandomSource | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
) -> str:
    """
    Generate a random folder identifier not contained in `existing`.

    Every character is drawn independently and uniformly from
    FOLDER_ID_ALPHABET. On a collision the whole string is resampled.

    Args:
        existing: Identifiers (or URIs) already in use.
        rng: Random source exposing choice(). Defaults to a SystemRandom;
             pass random.Random(seed) for reproducible output.
        max_attempts: Number of candidates tried before giving up.

    Returns:
        A FOLDER_ID_LENGTH character identifier.

    Raises:
        IdentifierSpaceExhaustedError: If every candidate collided.
        ValueError: If max_attempts is not positive.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    source = rng or _system_random
    taken = existing if isinstance(existing, (set, frozenset)) else set(existing)

    for _ in range(max_attempts):
        candidate = "".join(source.choice(FOLDER_ID_ALPHABET) for _ in range(FOLDER_ID_LENGTH))
        if candidate not in taken:
            return candidate

    raise IdentifierSpaceExhaustedError(
        f"No unused folder identifier found after {max_attempts} attempts",
        details={"attempts": max_attempts, "existing": len(taken)}
    )


def is_folder_id(value: str) -> bool:
    """Check whether a string has the shape of a generated folder identifier."""
    return len(value) == FOLDER_ID_LENGTH and all(c in FOLDER_ID_ALPHABET for c in value)


class FolderIdAllocator:
    """
    Session-scoped accumulator of folder identifiers.

    Seeded with the identifiers visible in a snapshot, the allocator
    remembers every identifier it hands out so that several folders can
    be created before anything is submitted.

    An allocator has a single owner and is not safe to share between
    threads without external locking.

    Attributes:
        generated: Identifiers minted so far, in order.
    """

    def __init__(
        self,
        in_use: Iterable[str] = (),
        rng: RandomSource | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS
    ) -> None:
        self._in_use = set(in_use)
        self._rng = rng
        self._max_attempts = max_attempts
        self.generated: list[str] = []

    def allocate(self) -> str:
        """Mint an identifier unused by the snapshot and by earlier calls."""
        folder_id = generate_folder_id(
            self._in_use,
            rng=self._rng,
            max_attempts=self._max_attempts,
        )
        self._in_use.add(folder_id)
        self.generated.append(folder_id)
        logger.debug(f"Allocated folder id {folder_id}")
        return folder_id

    def __contains__(self, value: object) -> bool:
        return value in self._in_use
