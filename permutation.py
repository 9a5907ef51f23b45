# permutation.py
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from alphabet import Alphabet
from errors import EnigmaError

# a whole specification: zero or more "(...)" groups separated by whitespace
_SPEC_RE = re.compile(r"\s*(?:\([^()\s]+\)\s*)*")
_CYCLE_RE = re.compile(r"\(([^()\s]+)\)")


class Permutation:
    """
    A permutation of the symbols of an Alphabet, given in cycle notation
    such as ``"(AELTPHQXRU) (BKNW) (S)"``.

    Symbols that appear in no cycle map to themselves, exactly like a
    singleton cycle. Both directions are stored as total mappings, so every
    lookup is a plain dict access.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        if not isinstance(cycles, str) or not _SPEC_RE.fullmatch(cycles):
            raise EnigmaError(f"Malformed cycle specification: {cycles!r}")

        self._alphabet = alphabet
        self._forward: dict[str, str] = {ch: ch for ch in alphabet}
        self._inverse: dict[str, str] = {ch: ch for ch in alphabet}

        seen: set[str] = set()
        for cycle in _CYCLE_RE.findall(cycles):
            self._add_cycle(cycle, seen)

    def _add_cycle(self, cycle: str, seen: set[str]) -> None:
        """Add c0->c1->...->cm->c0 for CYCLE == c0c1...cm."""
        for ch in cycle:
            if not self._alphabet.contains(ch):
                raise EnigmaError(f"Symbol {ch!r} in cycle ({cycle}) not in alphabet")
            if ch in seen:
                raise EnigmaError(f"Symbol {ch!r} appears in more than one place")
            seen.add(ch)

        for here, there in zip(cycle, cycle[1:] + cycle[:1]):
            self._forward[here] = there
            self._inverse[there] = here

    # ── alternative constructors ─────────────────────────────────
    @classmethod
    def identity(cls, alphabet: Alphabet) -> "Permutation":
        return cls("", alphabet)

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a wiring string: WIRING[i] is the image of symbol i."""
        if len(wiring) != alphabet.size() or sorted(wiring) != sorted(alphabet.chars):
            raise EnigmaError("wiring must be a permutation of alphabet")
        mapping = dict(zip(alphabet.chars, wiring))
        return cls(_join(_cycles_of(mapping, alphabet.chars)), alphabet)

    @classmethod
    def from_pairs(
        cls,
        pairs: str | Sequence[str | tuple[str, str]],
        alphabet: Alphabet,
    ) -> "Permutation":
        """Build a plugboard from swaps written as "AB CD" or ["AB", ("C", "D")]."""
        if isinstance(pairs, str):
            pairs = pairs.split()

        used: set[str] = set()
        cycles: list[str] = []
        for raw in pairs:
            # normalise to (a, b)
            if isinstance(raw, str):
                if len(raw) != 2:
                    raise EnigmaError(f"Pair {raw!r} must be exactly 2 symbols")
                a, b = raw
            else:
                a, b = raw

            if a == b:
                raise EnigmaError(f"Plugboard cannot map a symbol to itself: {a}")
            if a in used or b in used:
                dup = a if a in used else b
                raise EnigmaError(f"Character {dup!r} already used in plugboard")
            used.update((a, b))
            cycles.append(f"({a}{b})")
        return cls(" ".join(cycles), alphabet)

    # ── queries ──────────────────────────────────────────────────
    def size(self) -> int:
        return self._alphabet.size()

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    def wrap(self, p: int) -> int:
        """Return P modulo the size of this permutation."""
        return self._alphabet.wrap(p)

    def permute(self, p):
        """
        Apply this permutation to P. An integer is taken modulo the alphabet
        size and an integer comes back; a symbol gives a symbol.
        """
        if isinstance(p, str):
            self._alphabet.to_int(p)
            return self._forward[p]
        ch = self._alphabet.to_char(p)
        return self._alphabet.to_int(self._forward[ch])

    def invert(self, c):
        """Apply the inverse of this permutation to C (index or symbol)."""
        if isinstance(c, str):
            self._alphabet.to_int(c)
            return self._inverse[c]
        ch = self._alphabet.to_char(c)
        return self._alphabet.to_int(self._inverse[ch])

    def derangement(self) -> bool:
        """True iff no symbol maps to itself."""
        return all(self._forward[ch] != ch for ch in self._alphabet)

    def fixed_points(self) -> list[str]:
        return [ch for ch in self._alphabet if self._forward[ch] == ch]

    def is_involution(self) -> bool:
        """True iff applying the permutation twice gives the identity."""
        return all(self._forward[self._forward[ch]] == ch for ch in self._alphabet)

    def cycles(self) -> str:
        """Canonical cycle notation, fixed points left out."""
        return _join(_cycles_of(self._forward, self._alphabet.chars))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permutation):
            return NotImplemented
        return self._alphabet == other._alphabet and self._forward == other._forward

    def __hash__(self) -> int:
        return hash((self._alphabet, tuple(self._forward.values())))

    def __repr__(self) -> str:
        return f"<Permutation {self.cycles() or '()'}>"


def _cycles_of(mapping: dict[str, str], order: Iterable[str]) -> list[str]:
    """
    Walk MAPPING into its cycles, starting each one at the first unvisited
    symbol of ORDER. Singletons are left out.
    """
    visited: set[str] = set()
    bodies: list[str] = []
    for start in order:
        if start in visited:
            continue
        body = [start]
        visited.add(start)
        nxt = mapping[start]
        while nxt != start:
            body.append(nxt)
            visited.add(nxt)
            nxt = mapping[nxt]
        if len(body) > 1:
            bodies.append("".join(body))
    return bodies


def _join(bodies: list[str]) -> str:
    return " ".join(f"({b})" for b in bodies)
