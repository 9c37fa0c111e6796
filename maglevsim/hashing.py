"""String hash functions used to derive Maglev preference lists."""

from collections.abc import Iterator

MASK32 = 0xFFFFFFFF

DJB2_SEED = 5381
FNV1A_OFFSET_BASIS = 2166136261
FNV1A_PRIME = 16777619


def _signed_bytes(text: str) -> Iterator[int]:
    """Yield the UTF-8 bytes of ``text`` as signed 8-bit values."""
    for byte in text.encode("utf-8"):
        yield byte - 256 if byte > 127 else byte


def djb2_hash(text: str) -> int:
    """Return the 32-bit DJB2 hash of ``text``."""
    value = DJB2_SEED
    for c in _signed_bytes(text):
        value = (value * 33 + c) & MASK32
    return value


def sdbm_hash(text: str) -> int:
    """Return the 32-bit SDBM hash of ``text``."""
    value = 0
    for c in _signed_bytes(text):
        value = (c + (value << 6) + (value << 16) - value) & MASK32
    return value


def fnv1a_hash(text: str) -> int:
    """Return the 32-bit FNV-1a hash of ``text``."""
    value = FNV1A_OFFSET_BASIS
    for c in _signed_bytes(text):
        value ^= c & MASK32
        value = (value * FNV1A_PRIME) & MASK32
    return value


def hash_offset(text: str, table_size: int) -> int:
    """Return the starting slot of the preference list for ``text``."""
    if table_size < 1:
        raise ValueError(f"table size must be positive, got {table_size}")
    h1 = djb2_hash(text)
    h2 = fnv1a_hash(text)
    combined = h1 ^ ((h2 << 16) & MASK32) ^ (h2 >> 16)
    return combined % table_size


def hash_skip(text: str, table_size: int) -> int:
    """Return the step of the preference list for ``text``, in ``[1, table_size - 1]``."""
    if table_size < 2:
        raise ValueError(f"table size must be at least 2, got {table_size}")
    h1 = sdbm_hash(text)
    h2 = fnv1a_hash(text)
    combined = h1 ^ ((h2 << 8) & MASK32) ^ (h2 >> 24)
    return combined % (table_size - 1) + 1