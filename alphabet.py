# alphabet.py
from __future__ import annotations

import string

from errors import EnigmaError

UPPER = string.ascii_uppercase

# symbols reserved by the cycle notation
_RESERVED = set("()*")


class Alphabet:
    """An ordered set of distinct symbols numbered 0..size-1."""

    def __init__(self, chars: str = UPPER) -> None:
        if not chars:
            raise EnigmaError("Alphabet must contain at least one symbol")
        if len(set(chars)) != len(chars):
            dup = next(ch for ch in chars if chars.count(ch) > 1)
            raise EnigmaError(f"Symbol {dup!r} appears twice in alphabet")
        for ch in chars:
            if ch in _RESERVED or ch.isspace():
                raise EnigmaError(f"Symbol {ch!r} cannot be used in an alphabet")

        self._chars: str = chars
        self._char_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(chars)
        }

    @property
    def chars(self) -> str:
        return self._chars

    def size(self) -> int:
        return len(self._chars)

    def contains(self, ch: str) -> bool:
        return ch in self._char_to_index

    # letter → integer signal
    def to_int(self, ch: str) -> int:
        try:
            return self._char_to_index[ch]
        except (KeyError, TypeError):
            raise EnigmaError(
                f"Invalid character {ch!r} for current alphabet."
            ) from None

    # integer signal → letter
    def to_char(self, index: int) -> str:
        return self._chars[self.wrap(index)]

    def wrap(self, index: int) -> int:
        """Return INDEX modulo the alphabet size."""
        if isinstance(index, bool) or not isinstance(index, int):
            raise EnigmaError(f"Signal {index!r} is not an integer index")
        return index % len(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def __contains__(self, ch: object) -> bool:
        return ch in self._char_to_index

    def __iter__(self):
        return iter(self._chars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._chars == other._chars

    def __hash__(self) -> int:
        return hash(self._chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self._chars!r}>"
