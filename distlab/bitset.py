"""Fixed-size bit sets used to track which operations are linearized."""

from __future__ import annotations

_WORD_BITS = 64
_WORD_MASK = (1 << _WORD_BITS) - 1


class Bitset:
    """A set of bit positions stored in 64-bit words.

    The capacity is the requested size rounded up to a whole number of
    64-bit words. Positions outside that capacity raise ``IndexError``.
    """

    __slots__ = ("_words", "_value")

    def __init__(self, bits: int) -> None:
        if bits < 0:
            raise ValueError(f"bitset size must be non-negative, got {bits}")
        self._words = -(-bits // _WORD_BITS)
        self._value = 0

    @property
    def capacity(self) -> int:
        """Number of addressable bit positions."""
        return self._words * _WORD_BITS

    def _check(self, pos: int) -> None:
        if not 0 <= pos < self.capacity:
            raise IndexError(f"bit position {pos} out of range for capacity {self.capacity}")

    def clone(self) -> Bitset:
        """Return an independent copy."""
        copy = Bitset.__new__(Bitset)
        copy._words = self._words
        copy._value = self._value
        return copy

    def set(self, pos: int) -> Bitset:
        """Set the bit at ``pos`` and return this bitset."""
        self._check(pos)
        self._value |= 1 << pos
        return self

    def clear(self, pos: int) -> Bitset:
        """Clear the bit at ``pos`` and return this bitset."""
        self._check(pos)
        self._value &= ~(1 << pos)
        return self

    def get(self, pos: int) -> bool:
        """Whether the bit at ``pos`` is set."""
        self._check(pos)
        return bool((self._value >> pos) & 1)

    def popcount(self) -> int:
        """Number of set bits."""
        return self._value.bit_count()

    def __hash__(self) -> int:
        digest = self.popcount()
        value = self._value
        while value:
            digest ^= value & _WORD_MASK
            value >>= _WORD_BITS
        return digest

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitset):
            return NotImplemented
        return self._words == other._words and self._value == other._value

    def __repr__(self) -> str:
        members = [pos for pos in range(self.capacity) if (self._value >> pos) & 1]
        return f"Bitset(capacity={self.capacity}, set={members})"