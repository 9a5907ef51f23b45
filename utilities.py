# utilities.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from alphabet import UPPER, Alphabet
from errors import EnigmaError
from machine import Machine
from permutation import Permutation
from rotor_and_reflector import Rotor

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_num_re = re.compile(r"^([A-Za-z]+)(\d+)$")
_roman = {"I": 1, "II": 2, "III": 3, "IV": 4, "V": 5, "VI": 6, "VII": 7, "VIII": 8}
ROTOR_TYPES = ("moving", "fixed", "reflector")


def _nat_key(name: str):
    """Natural‑sort rotor names so I, II, …, VIII, R1, R2, …, then the rest."""
    if name in _roman:
        return (0, "", _roman[name])
    m = _num_re.match(name)
    if m:
        prefix, num = m.groups()
        return (1, prefix, int(num))
    return (2, name, 0)


# ────────────────────────────────────────────────────────────────────────
#  1. Rotor catalog
# ────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RotorSpec:
    """Catalog entry for one wheel. Turned into a fresh Rotor on demand."""

    name: str
    kind: str
    cycles: str
    notches: str = ""

    def build(self, alphabet: Alphabet) -> Rotor:
        perm = Permutation(self.cycles, alphabet)
        if self.kind == "moving":
            return Rotor.moving(self.name, perm, self.notches)
        if self.notches:
            raise EnigmaError(f"{self.kind} rotor {self.name} cannot have notches")
        if self.kind == "fixed":
            return Rotor.fixed(self.name, perm)
        return Rotor.reflector(self.name, perm)


@dataclass(frozen=True)
class Catalog:
    """Immutable registry of the wheels a machine can be built from."""

    name: str
    alphabet: Alphabet
    num_rotors: int
    pawls: int
    specs: Mapping[str, RotorSpec] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "specs", MappingProxyType(dict(self.specs)))

    def names(self) -> List[str]:
        return sorted(self.specs, key=_nat_key)

    def reflectors(self) -> List[str]:
        return [n for n in self.names() if self.specs[n].kind == "reflector"]

    def build_rotors(self) -> List[Rotor]:
        return [spec.build(self.alphabet) for spec in self.specs.values()]

    def build_machine(self, *, pass_unknown: bool = False) -> Machine:
        """Return a machine with its own freshly built rotor pool."""
        return Machine(
            self.alphabet,
            self.num_rotors,
            self.pawls,
            self.build_rotors(),
            pass_unknown=pass_unknown,
        )


def _count(data: dict, key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise EnigmaError(f"Catalog '{key}' must be an integer, got {value!r}")
    return value


def catalog_from_dict(data: dict) -> Catalog:
    if not isinstance(data, dict):
        raise EnigmaError("Catalog must be a JSON object")
    required = {"alphabet", "slots", "pawls", "rotors"}
    missing = required - data.keys()
    if missing:
        raise EnigmaError(f"Missing keys in catalog: {', '.join(sorted(missing))}")
    if not isinstance(data["alphabet"], str):
        raise EnigmaError("Catalog 'alphabet' must be a string of symbols")
    if not isinstance(data["rotors"], dict):
        raise EnigmaError("Catalog 'rotors' must map names to rotor entries")
    slots, pawls = _count(data, "slots"), _count(data, "pawls")

    alphabet = Alphabet(data["alphabet"])
    specs: Dict[str, RotorSpec] = {}
    for name, entry in data["rotors"].items():
        if not isinstance(entry, dict):
            raise EnigmaError(f"Rotor {name}: entry must be an object")
        kind = entry.get("type")
        if kind not in ROTOR_TYPES:
            raise EnigmaError(f"Rotor {name}: type must be one of {', '.join(ROTOR_TYPES)}")
        if ("cycles" in entry) == ("wiring" in entry):
            raise EnigmaError(f"Rotor {name}: give exactly one of 'cycles' or 'wiring'")
        for field_name in ("cycles", "wiring", "notches"):
            if not isinstance(entry.get(field_name, ""), str):
                raise EnigmaError(f"Rotor {name}: '{field_name}' must be a string")
        if "wiring" in entry:
            cycles = Permutation.from_wiring(entry["wiring"], alphabet).cycles()
        else:
            cycles = entry["cycles"]
        key = name.upper()
        if key in specs:
            raise EnigmaError(f"Rotor {name} defined twice")
        specs[key] = RotorSpec(key, kind, cycles, entry.get("notches", ""))

    catalog = Catalog(
        data.get("name", "custom"),
        alphabet,
        slots,
        pawls,
        specs,
    )
    # build once so bad wiring or notches fail at load time
    catalog.build_machine()
    return catalog


def load_catalog(path: str | Path) -> Catalog:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise EnigmaError(f"{path}: not valid JSON ({e})") from e
    return catalog_from_dict(data)


# ────────────────────────────────────────────────────────────────────────
#  2. Wheel database
# ────────────────────────────────────────────────────────────────────────

# Naval (M4) wheels in cycle notation -------------------------------------
NAVAL: dict = {
    "name": "naval",
    "alphabet": UPPER,
    "slots": 5,
    "pawls": 3,
    "rotors": {
        "I":     {"type": "moving", "notches": "Q",
                  "cycles": "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)"},
        "II":    {"type": "moving", "notches": "E",
                  "cycles": "(FIXVYOMW) (CDKLHUP) (ESZ) (BJ) (GR) (NT) (A) (Q)"},
        "III":   {"type": "moving", "notches": "V",
                  "cycles": "(ABDHPEJT) (CFLVMZOYQIRWUKXSG) (N)"},
        "IV":    {"type": "moving", "notches": "J",
                  "cycles": "(AEPLIYWCOXMRFZBSTGJQNH) (DV) (KU)"},
        "V":     {"type": "moving", "notches": "Z",
                  "cycles": "(AVOLDRWFIUQ)(BZKSMNHYC) (EGTJPX)"},
        "VI":    {"type": "moving", "notches": "ZM",
                  "cycles": "(AJQDVLEOZWIYTS) (CGMNHFUX) (BPRK)"},
        "VII":   {"type": "moving", "notches": "ZM",
                  "cycles": "(ANOUPFRIMBZTLWKSVEGCJYDHXQ)"},
        "VIII":  {"type": "moving", "notches": "ZM",
                  "cycles": "(AFLSETWUNDHOZVICQ) (BKJ) (GXY) (MPR)"},
        "BETA":  {"type": "fixed",
                  "cycles": "(ALBEVFCYODJWUGNMQTZSKPR) (HIX)"},
        "GAMMA": {"type": "fixed",
                  "cycles": "(AFNIRLBSQWVXGUZDKMTPCOYJHE)"},
        "B":     {"type": "reflector",
                  "cycles": "(AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP) (RX) (SZ) (TV)"},
        "C":     {"type": "reflector",
                  "cycles": "(AR) (BD) (CO) (EJ) (FN) (GT) (HK) (IV) (LM) (PW) (QZ) (SX) (UY)"},
    },
}

# Enigma I wheels as wiring strings --------------------------------------
ENIGMA_I: dict = {
    "name": "enigma-i",
    "alphabet": UPPER,
    "slots": 4,
    "pawls": 3,
    "rotors": {
        "I":   {"type": "moving", "notches": "Q", "wiring": "EKMFLGDQVZNTOWYHXUSPAIBRCJ"},
        "II":  {"type": "moving", "notches": "E", "wiring": "AJDKSIRUXBLHWTMCQGZNPYFVOE"},
        "III": {"type": "moving", "notches": "V", "wiring": "BDFHJLCPRTXVZNYEIWGAKMUSQO"},
        "IV":  {"type": "moving", "notches": "J", "wiring": "ESOVPZJAYQUIRHXLNFTGKDCMWB"},
        "V":   {"type": "moving", "notches": "Z", "wiring": "VZBRGITYUPSDNHLXAWMJQOFECK"},
        "A":   {"type": "reflector", "wiring": "EJMZALYXVBWFCRQUONTSPIKHGD"},
        "B":   {"type": "reflector", "wiring": "YRUHQSLDPXNGOKMIEBFZCWVJAT"},
        "C":   {"type": "reflector", "wiring": "FVPJIAOYEDRZXWGCTKUQSBNMHL"},
    },
}

BUILTIN_CATALOGS: Dict[str, dict] = {
    NAVAL["name"]: NAVAL,
    ENIGMA_I["name"]: ENIGMA_I,
}


def builtin_catalog(name: str = "naval") -> Catalog:
    try:
        data = BUILTIN_CATALOGS[name.lower()]
    except KeyError:
        raise EnigmaError(
            f"Unknown catalog '{name}'. Expected one of {list(BUILTIN_CATALOGS)}"
        ) from None
    return catalog_from_dict(data)


# ────────────────────────────────────────────────────────────────────────
#  3. Settings lines
# ────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Settings:
    rotors: Tuple[str, ...]
    setting: str
    rings: str | None = None
    plugboard: str = ""


def parse_settings(line: str, num_rotors: int) -> Settings:
    """
    Split a settings line such as ``* B BETA III IV I AXLE (HQ) (EX)`` into
    its parts. Ring settings, when present, follow the rotor setting.
    """
    text = line.strip()
    if not text.startswith("*"):
        raise EnigmaError(f"settings line must start with '*': {line!r}")

    tokens = text[1:].split()
    if len(tokens) < num_rotors + 1:
        raise EnigmaError(f"settings line names too few rotors: {line!r}")

    names = tuple(tokens[:num_rotors])
    setting = tokens[num_rotors]
    rest = tokens[num_rotors + 1:]

    rings = None
    if rest and not rest[0].startswith("("):
        rings, rest = rest[0], rest[1:]
    return Settings(names, setting, rings, " ".join(rest))


def apply_settings(machine: Machine, settings: Settings) -> None:
    machine.insert_rotors(settings.rotors)
    machine.set_rotors(settings.setting)
    if settings.rings is not None:
        machine.set_rings(settings.rings)
    machine.set_plugboard(Permutation(settings.plugboard, machine.alphabet))


def configure(machine: Machine, line: str) -> None:
    apply_settings(machine, parse_settings(line, machine.num_rotors))


# ────────────────────────────────────────────────────────────────────────
#  4. Text preprocessing
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str, alpha: Alphabet) -> str:
    """Drop whitespace and upper‑case letters the alphabet only has in upper case."""
    out: List[str] = []
    for ch in msg:
        if ch.isspace():
            continue
        if not alpha.contains(ch) and alpha.contains(ch.upper()):
            ch = ch.upper()
        out.append(ch)
    return "".join(out)


def group(text: str, block: int = 5) -> str:
    """Split TEXT into space-separated groups of BLOCK symbols."""
    if block < 1:
        raise EnigmaError("block size must be positive")
    return " ".join(text[i : i + block] for i in range(0, len(text), block))


__all__ = [
    "Catalog",
    "RotorSpec",
    "Settings",
    "builtin_catalog",
    "catalog_from_dict",
    "load_catalog",
    "parse_settings",
    "apply_settings",
    "configure",
    "preprocess_message",
    "group",
]
