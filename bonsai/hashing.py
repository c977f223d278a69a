"""
Seeded string hash stream.

All structural randomness in a tree comes from hashing short text keys
built from a DNA segment plus integer offsets. The hash is cyrb53: a fast,
well-mixed, non-cryptographic 53-bit hash built from 32-bit multiplies.

The arithmetic is done on Python ints masked to 32 bits, and characters are
consumed as UTF-16 code units, so a given key maps to the same value on every
platform and interpreter.
"""

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


def _code_units(text: str) -> list[int]:
    """UTF-16 code units of text (surrogate pairs for astral characters)."""
    data = text.encode("utf-16-le", errors="surrogatepass")
    return [data[i] | (data[i + 1] << 8) for i in range(0, len(data), 2)]


def hash_text(text: str, seed: int = 0) -> int:
    """
    cyrb53 hash of text.

    Returns:
        Unsigned integer in [0, 2**53)
    """
    h1 = (0xDEADBEEF ^ seed) & _MASK32
    h2 = (0x41C6CE57 ^ seed) & _MASK32

    for ch in _code_units(text):
        h1 = _imul(h1 ^ ch, 2654435761)
        h2 = _imul(h2 ^ ch, 1597334677)

    h1 = _imul(h1 ^ (h1 >> 16), 2246822507) ^ _imul(h2 ^ (h2 >> 13), 3266489909)
    h2 = _imul(h2 ^ (h2 >> 16), 2246822507) ^ _imul(h1 ^ (h1 >> 13), 3266489909)

    return 4294967296 * (0x1FFFFF & h2) + h1


def float_at_text(text: str) -> float:
    """Map text to a float in [0, 1) with 1/1000 resolution."""
    return (hash_text(text) % 1000) / 1000
