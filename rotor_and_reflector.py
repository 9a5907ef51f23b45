# rotor_and_reflector.py
from __future__ import annotations

from collections.abc import Iterable

from alphabet import Alphabet
from debug import Debug
from errors import EnigmaError
from permutation import Permutation

debug = Debug()


class Rotor:
    """
    A wired wheel: a Permutation seen through a rotational offset.

    One class covers every kind of wheel. ``rotates`` says whether a pawl
    can move it, ``reflecting`` marks the reflector that folds the signal
    back. A reflector never rotates and has no notches; a fixed wheel has
    no notches either. ``setting`` and ``ring`` are the only mutable state.
    """

    def __init__(
        self,
        name: str,
        permutation: Permutation,
        notches: str | Iterable[int] = "",
        *,
        rotates: bool = True,
        reflecting: bool = False,
    ) -> None:
        self._name = name
        self._permutation = permutation
        self._rotates = rotates
        self._reflecting = reflecting
        self._notches = frozenset(self._notch_indices(notches))

        if reflecting:
            if rotates:
                raise EnigmaError(f"Reflector {name} cannot rotate")
            if not permutation.derangement():
                raise EnigmaError(f"Reflector {name} wiring must have no fixed points")
        if self._notches and not rotates:
            raise EnigmaError(f"Rotor {name} cannot have notches without rotating")

        self.setting = 0
        self.ring = 0

    def _notch_indices(self, notches: str | Iterable[int]) -> list[int]:
        alpha = self.alphabet
        if isinstance(notches, str):
            if not all(alpha.contains(ch) for ch in notches):
                raise EnigmaError("Notch characters must be in the alphabet")
            return [alpha.to_int(ch) for ch in notches]
        return [alpha.wrap(n) for n in notches]

    # ── factories ────────────────────────────────────────────────
    @classmethod
    def moving(cls, name: str, permutation: Permutation, notches: str | Iterable[int] = "") -> "Rotor":
        return cls(name, permutation, notches)

    @classmethod
    def fixed(cls, name: str, permutation: Permutation) -> "Rotor":
        return cls(name, permutation, rotates=False)

    @classmethod
    def reflector(cls, name: str, permutation: Permutation) -> "Rotor":
        return cls(name, permutation, rotates=False, reflecting=True)

    # ── read-only properties ─────────────────────────────────────
    @property
    def name(self) -> str:
        return self._name

    @property
    def permutation(self) -> Permutation:
        return self._permutation

    @property
    def alphabet(self) -> Alphabet:
        return self._permutation.alphabet

    @property
    def notches(self) -> frozenset[int]:
        return self._notches

    def size(self) -> int:
        return self._permutation.size()

    @property
    def rotates(self) -> bool:
        return self._rotates

    @property
    def reflecting(self) -> bool:
        return self._reflecting

    # ── settings ─────────────────────────────────────────────────
    def set(self, posn: int | str) -> None:
        """Set the window to POSN, an index or an alphabet symbol."""
        self.setting = self._position(posn)

    def set_ring(self, posn: int | str) -> None:
        self.ring = self._position(posn)

    def reset(self) -> None:
        self.setting = 0
        self.ring = 0

    def _position(self, posn: int | str) -> int:
        if isinstance(posn, str):
            return self.alphabet.to_int(posn)
        return self._permutation.wrap(posn)

    # ── stepping ─────────────────────────────────────────────────
    def at_notch(self) -> bool:
        return self.setting in self._notches

    def advance(self) -> None:
        if not self._rotates:
            raise EnigmaError(f"Rotor {self._name} cannot advance")
        self.setting = (self.setting + 1) % self.size()
        debug.log("rotor", f"{self._name} -> {self.alphabet.to_char(self.setting)}")

    # ── signal paths ─────────────────────────────────────────────
    def convert_forward(self, p: int) -> int:
        shift = self.setting - self.ring
        mapped = self._permutation.permute(self._permutation.wrap(p) + shift)
        return self._permutation.wrap(mapped - shift)

    def convert_backward(self, e: int) -> int:
        shift = self.setting - self.ring
        mapped = self._permutation.invert(self._permutation.wrap(e) + shift)
        return self._permutation.wrap(mapped - shift)

    # ── niceties ─────────────────────────────────────────────────
    def __repr__(self) -> str:
        kind = "reflector" if self._reflecting else "moving" if self._rotates else "fixed"
        pos = self.alphabet.to_char(self.setting)
        return f"<Rotor {self._name} {kind} pos={pos} ring={self.alphabet.to_char(self.ring)}>"
