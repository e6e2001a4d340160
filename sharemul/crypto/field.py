"""Prime-field arithmetic F_p.

Two layers live here:

* int-level helpers (``add``, ``sub``, ``mul`` ...) that take raw Python
  ints and an optional modulus, defaulting to ``config.PRIME``;
* ``PrimeField`` / ``FieldElement``, an immutable value type built on the
  helpers and used throughout the protocol code.

The modulus is assumed to be prime; that is a precondition, not checked.
Python ints are arbitrary precision, so products never overflow before
reduction.
"""

from __future__ import annotations

import operator
from typing import Union

from sharemul.config import PRIME
from sharemul.errors import DivisionByZero


# ---------------------------------------------------------------------------
# int-level helpers
# ---------------------------------------------------------------------------


def reduce(a: int, p: int = PRIME) -> int:
    """Reduce an integer into [0, p)."""
    return a % p


def add(a: int, b: int, p: int = PRIME) -> int:
    """Field addition."""
    return (a + b) % p


def sub(a: int, b: int, p: int = PRIME) -> int:
    """Field subtraction (floor modulo takes care of the borrow)."""
    return (a - b) % p


def mul(a: int, b: int, p: int = PRIME) -> int:
    """Field multiplication."""
    return (a * b) % p


def neg(a: int, p: int = PRIME) -> int:
    """Additive inverse."""
    return (-a) % p


def power(a: int, e: int, p: int = PRIME) -> int:
    """Square-and-multiply exponentiation, *e* >= 0."""
    if e < 0:
        raise ValueError(f"Exponent must be non-negative, got {e}")
    return pow(a % p, e, p)


def inv(a: int, p: int = PRIME) -> int:
    """Multiplicative inverse via Fermat's little theorem (p is prime)."""
    if a % p == 0:
        raise DivisionByZero(f"Cannot invert zero in F_{p}")
    return pow(a, p - 2, p)


def div(a: int, b: int, p: int = PRIME) -> int:
    """Field division ``a * b^-1``."""
    return mul(a, inv(b, p), p)


# ---------------------------------------------------------------------------
# Element types
# ---------------------------------------------------------------------------


class PrimeField:
    """The field F_p.  Calling it builds an element: ``F = PrimeField(17); F(5)``."""

    __slots__ = ("prime",)

    def __init__(self, prime: int = PRIME) -> None:
        if prime < 2:
            raise ValueError(f"Field modulus must be >= 2, got {prime}")
        self.prime = prime

    def __call__(self, value: Union[int, "FieldElement"]) -> "FieldElement":
        return FieldElement(value, self)

    @property
    def zero(self) -> "FieldElement":
        return FieldElement(0, self)

    @property
    def one(self) -> "FieldElement":
        return FieldElement(1, self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrimeField):
            return NotImplemented
        return self.prime == other.prime

    def __hash__(self) -> int:
        return hash(("PrimeField", self.prime))

    def __repr__(self) -> str:
        return f"PrimeField({self.prime})"


DEFAULT_FIELD = PrimeField(PRIME)


class FieldElement:
    """An immutable integer modulo ``field.prime``, always in [0, p).

    Plain ints on either side of an operator are coerced into the
    element's field.  Floats are rejected.
    """

    __slots__ = ("value", "field")

    def __init__(self, value: Union[int, "FieldElement"], field: PrimeField | None = None) -> None:
        if field is None:
            field = value.field if isinstance(value, FieldElement) else DEFAULT_FIELD
        if isinstance(value, FieldElement):
            if value.field != field:
                raise ValueError(f"Cannot move {value!r} into {field!r}")
            value = value.value
        object.__setattr__(self, "field", field)
        object.__setattr__(self, "value", reduce(operator.index(value), field.prime))

    def __setattr__(self, name, value):
        raise AttributeError("FieldElement is immutable")

    # ---- helpers ----

    @property
    def prime(self) -> int:
        return self.field.prime

    def _coerce(self, other) -> "FieldElement":
        if isinstance(other, FieldElement):
            if other.field != self.field:
                raise ValueError(f"Field mismatch: {self.field!r} vs {other.field!r}")
            return other
        if isinstance(other, int):
            return FieldElement(other, self.field)
        return NotImplemented

    def is_zero(self) -> bool:
        return self.value == 0

    def inverse(self) -> "FieldElement":
        return FieldElement(inv(self.value, self.prime), self.field)

    def power(self, exponent: int) -> "FieldElement":
        return FieldElement(power(self.value, exponent, self.prime), self.field)

    # ---- arithmetic ----

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return FieldElement(add(self.value, other.value, self.prime), self.field)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return FieldElement(sub(self.value, other.value, self.prime), self.field)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return other - self

    def __mul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return FieldElement(mul(self.value, other.value, self.prime), self.field)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return FieldElement(div(self.value, other.value, self.prime), self.field)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return other / self

    def __neg__(self) -> "FieldElement":
        return FieldElement(neg(self.value, self.prime), self.field)

    def __pow__(self, exponent: int) -> "FieldElement":
        return self.power(exponent)

    # ---- comparison / conversion ----

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldElement):
            return self.field == other.field and self.value == other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __hash__(self) -> int:
        # Equal to hash(int) so that elements compare and hash like their value.
        return hash(self.value)

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"FieldElement({self.value}, p={self.prime})"

    def __str__(self) -> str:
        return str(self.value)
