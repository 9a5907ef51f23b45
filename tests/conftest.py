"""Shared fixtures for the rotor machine tests."""

import pytest

from alphabet import Alphabet
from debug import Debug
from utilities import builtin_catalog


@pytest.fixture
def upper():
    return Alphabet()


@pytest.fixture
def naval():
    """Fresh M4 machine: 5 slots, 3 pawls."""
    return builtin_catalog("naval").build_machine()


@pytest.fixture
def enigma_i():
    """Fresh Enigma I machine: 4 slots, 3 pawls, wide reflectors."""
    return builtin_catalog("enigma-i").build_machine()


@pytest.fixture(autouse=True)
def quiet_debug():
    """Leave every debug component off between tests."""
    yield
    dbg = Debug()
    dbg.disable(*Debug.names())
    dbg.toggle_global(True)
