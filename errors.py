# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Raised for any bad machine configuration or unresolvable signal."""
