"""Tests for rotors, fixed wheels and reflectors."""

import pytest

from alphabet import Alphabet
from errors import EnigmaError
from permutation import Permutation
from rotor_and_reflector import Rotor

ROTOR_I = "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)"
THIN_B = "(AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP) (RX) (SZ) (TV)"


@pytest.fixture
def rotor_i(upper):
    return Rotor.moving("I", Permutation(ROTOR_I, upper), "Q")


class TestConversion:
    """Signals through a rotor at various settings."""

    def test_setting_zero_is_plain_wiring(self, rotor_i):
        assert rotor_i.convert_forward(0) == 4
        assert rotor_i.convert_backward(4) == 0

    def test_setting_shifts_contacts(self, rotor_i):
        rotor_i.set("B")
        # A enters on contact B, leaves K, seen one step back as J
        assert rotor_i.convert_forward(0) == 9
        assert rotor_i.convert_backward(9) == 0

    def test_ring_setting(self, rotor_i):
        rotor_i.set_ring("B")
        assert rotor_i.convert_forward(0) == 10

    def test_forward_and_backward_are_inverse(self, rotor_i):
        for posn in range(26):
            rotor_i.set(posn)
            for c in range(26):
                assert rotor_i.convert_backward(rotor_i.convert_forward(c)) == c

    def test_set_by_index_wraps(self, rotor_i):
        rotor_i.set(27)
        assert rotor_i.setting == 1

    def test_set_rejects_unknown_symbol(self, rotor_i):
        with pytest.raises(EnigmaError):
            rotor_i.set("a")


class TestStepping:
    """Advancing and notch detection."""

    def test_advance_wraps(self, rotor_i):
        rotor_i.set("Z")
        rotor_i.advance()
        assert rotor_i.setting == 0

    def test_at_notch(self, rotor_i):
        rotor_i.set("P")
        assert not rotor_i.at_notch()
        rotor_i.advance()
        assert rotor_i.at_notch()
        rotor_i.advance()
        assert not rotor_i.at_notch()

    def test_notches_as_indices(self, upper):
        rotor = Rotor.moving("X", Permutation(ROTOR_I, upper), [4, 12])
        assert rotor.notches == frozenset({4, 12})
        rotor.set("M")
        assert rotor.at_notch()

    def test_notch_outside_alphabet(self, upper):
        with pytest.raises(EnigmaError):
            Rotor.moving("X", Permutation(ROTOR_I, upper), "Q1")

    def test_reset(self, rotor_i):
        rotor_i.set("C")
        rotor_i.set_ring("D")
        rotor_i.reset()
        assert (rotor_i.setting, rotor_i.ring) == (0, 0)


class TestKinds:
    """Moving, fixed and reflecting wheels."""

    def test_moving(self, rotor_i):
        assert rotor_i.rotates
        assert not rotor_i.reflecting
        assert rotor_i.name == "I"

    def test_fixed_wheel_cannot_advance(self, upper):
        beta = Rotor.fixed("BETA", Permutation("(ALBEVFCYODJWUGNMQTZSKPR) (HIX)", upper))
        assert not beta.rotates
        assert not beta.at_notch()
        with pytest.raises(EnigmaError):
            beta.advance()

    def test_reflector(self, upper):
        refl = Rotor.reflector("B", Permutation(THIN_B, upper))
        assert refl.reflecting
        assert not refl.rotates
        assert refl.notches == frozenset()
        assert refl.convert_forward(0) == 4
        with pytest.raises(EnigmaError):
            refl.advance()

    def test_reflector_must_be_derangement(self, upper):
        with pytest.raises(EnigmaError):
            Rotor.reflector("R", Permutation("(AB)", upper))

    def test_reflector_cannot_rotate(self, upper):
        with pytest.raises(EnigmaError):
            Rotor("R", Permutation(THIN_B, upper), rotates=True, reflecting=True)

    def test_fixed_wheel_cannot_have_notches(self, upper):
        with pytest.raises(EnigmaError):
            Rotor("F", Permutation(ROTOR_I, upper), "A", rotates=False)

    def test_repr(self, rotor_i):
        rotor_i.set("C")
        assert repr(rotor_i) == "<Rotor I moving pos=C ring=A>"

    def test_small_alphabet(self):
        alpha = Alphabet("ABCD")
        rotor = Rotor.moving("R", Permutation("(ABCD)", alpha), "D")
        rotor.set("D")
        assert rotor.at_notch()
        # a single full cycle looks the same from every position
        assert rotor.convert_forward(0) == 1
