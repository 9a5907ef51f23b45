# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Iterable, Sequence

from alphabet import Alphabet
from debug import Debug
from errors import EnigmaError
from permutation import Permutation
from rotor_and_reflector import Rotor

debug = Debug()


class Machine:
    """
    A rotor machine with NUM_ROTORS slots, the rightmost PAWLS of which can
    move. Slot 0 holds the reflector. ALL_ROTORS is the pool the slots are
    filled from; a rotor is used in at most one slot at a time.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Iterable[Rotor],
        *,
        pass_unknown: bool = False,
    ) -> None:
        if num_rotors < 2:
            raise EnigmaError("a machine needs at least 2 rotor slots")
        if not 0 <= pawls < num_rotors:
            raise EnigmaError(f"pawl count must be in 0..{num_rotors - 1}")

        self._alphabet = alphabet
        self._num_rotors = num_rotors
        self._num_pawls = pawls
        self._all_rotors: dict[str, Rotor] = {}
        for rotor in all_rotors:
            key = rotor.name.upper()
            if key in self._all_rotors:
                raise EnigmaError(f"two rotors named {rotor.name}")
            self._all_rotors[key] = rotor

        self._slots: list[Rotor] = []
        self._plugboard = Permutation.identity(alphabet)
        self.pass_unknown = pass_unknown

    # ── read-only views ─────────────────────────────────────────

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def num_rotors(self) -> int:
        return self._num_rotors

    @property
    def num_pawls(self) -> int:
        return self._num_pawls

    @property
    def rotors(self) -> tuple[Rotor, ...]:
        """The rotors in slot order, reflector first."""
        return tuple(self._slots)

    @property
    def plugboard(self) -> Permutation:
        return self._plugboard

    def setting(self) -> str:
        """The letters showing in the windows, leftmost first."""
        return "".join(self._alphabet.to_char(r.setting) for r in self._slots[1:])

    # ── setup ───────────────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """
        Fill the slots with the rotors NAMES (NAMES[0] names the reflector).
        Every inserted rotor starts at setting 0 and ring 0.
        """
        if len(names) != self._num_rotors:
            raise EnigmaError(
                f"wrong number of rotors: need {self._num_rotors}, got {len(names)}"
            )

        chosen: list[Rotor] = []
        seen: set[str] = set()
        for name in names:
            key = name.upper()
            if key in seen:
                raise EnigmaError(f"rotor {name} used twice")
            seen.add(key)
            try:
                rotor = self._all_rotors[key]
            except KeyError:
                raise EnigmaError(f"unknown rotor {name!r}") from None
            if rotor.alphabet != self._alphabet:
                raise EnigmaError(f"rotor {name} is wired for a different alphabet")
            chosen.append(rotor)

        for name, rotor in zip(names[1:], chosen[1:]):
            if rotor.reflecting:
                raise EnigmaError(f"reflector {name} can only go in the first slot")
        if self._num_pawls and not chosen[-1].rotates:
            raise EnigmaError(f"rightmost rotor {names[-1]} must be a moving rotor")

        for rotor in chosen:
            rotor.reset()
        self._slots = chosen

    def set_rotors(self, setting: str) -> None:
        """
        Set the non-reflector rotors from SETTING, one symbol per slot,
        leftmost first.
        """
        self._require_rotors()
        if len(setting) != self._num_rotors - 1:
            raise EnigmaError("settings not right length")
        if not self._slots[0].reflecting:
            raise EnigmaError("first rotor isn't a reflector")
        positions = [self._symbol(ch, "setting") for ch in setting]
        for rotor, posn in zip(self._slots[1:], positions):
            rotor.set(posn)

    def set_rings(self, rings: str) -> None:
        """Set the ring offsets of the non-reflector rotors, leftmost first."""
        self._require_rotors()
        if len(rings) != self._num_rotors - 1:
            raise EnigmaError("ring settings not right length")
        positions = [self._symbol(ch, "ring setting") for ch in rings]
        for rotor, posn in zip(self._slots[1:], positions):
            rotor.set_ring(posn)

    def set_plugboard(self, plugboard: Permutation | None) -> None:
        """Install PLUGBOARD; None restores the identity."""
        if plugboard is None:
            plugboard = Permutation.identity(self._alphabet)
        elif plugboard.alphabet != self._alphabet:
            raise EnigmaError("plugboard is wired for a different alphabet")
        self._plugboard = plugboard

    def _symbol(self, ch: str, what: str) -> int:
        if not self._alphabet.contains(ch):
            raise EnigmaError(f"{what} symbol {ch!r} not in alphabet")
        return self._alphabet.to_int(ch)

    def _require_rotors(self) -> None:
        if not self._slots:
            raise EnigmaError("no rotors inserted")

    # ── stepping logic  ─────────────────────────────────────────

    def _step_rotors(self) -> None:
        """
        Advance the rotors for one key-press.

        The rightmost rotor always moves. Any other rotor under a pawl moves
        when it, or its right-hand neighbour, sits at a notch. Every notch is
        read before anything turns, which is what makes a rotor at its own
        notch carry its left neighbour with it (the double step).
        """
        last = self._num_rotors - 1
        first = max(1, self._num_rotors - self._num_pawls)
        notched = [rotor.at_notch() for rotor in self._slots]

        # decide which rotors step, then step them
        moving = [
            self._slots[i]
            for i in range(first, last + 1)
            if self._slots[i].rotates
            and (i == last or notched[i] or notched[i + 1])
        ]
        for rotor in moving:
            rotor.advance()

        if debug.active("stepping"):
            debug.log("stepping", f"window {self.setting()}")

    # ── convert  ────────────────────────────────────────────────

    def convert(self, c):
        """
        Encipher C after advancing the machine. An integer index gives an
        integer index; a string is converted symbol by symbol.
        """
        if isinstance(c, str):
            return self._convert_message(c)
        return self._convert_index(c)

    def _convert_index(self, c: int) -> int:
        self._require_rotors()
        signal = self._alphabet.wrap(c)
        self._step_rotors()

        signal = self._plugboard.permute(signal)
        debug.log("plugboard", f"in  {c} -> {signal}")

        for rotor in reversed(self._slots):
            signal = rotor.convert_forward(signal)

        debug.log("reflector", f"{self._slots[0].name} -> {signal}")

        for rotor in self._slots[1:]:
            signal = rotor.convert_backward(signal)

        out = self._plugboard.permute(signal)
        debug.log("plugboard", f"out {signal} -> {out}")
        return out

    def _convert_message(self, msg: str) -> str:
        out: list[str] = []
        for ch in msg:
            if self._alphabet.contains(ch):
                out.append(self._alphabet.to_char(self._convert_index(self._alphabet.to_int(ch))))
            elif self.pass_unknown:
                out.append(ch)
            else:
                raise EnigmaError(f"Invalid character {ch!r} for current alphabet.")
        result = "".join(out)
        if debug.active("convert"):
            debug.log("convert", f"{msg!r} -> {result!r}")
        return result

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self._slots) or "empty"
        return f"<Machine {names} window={self.setting()!r}>"
