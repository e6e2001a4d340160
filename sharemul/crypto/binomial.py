"""Binomial coefficients mod p from precomputed factorial tables.

The tables are built once in O(cap) and are read-only afterwards, so
every ``choose`` query is O(1).  Modular inverses of 1..cap-1 come from
the recurrence

    inv[i] = p - inv[p mod i] * (p // i)   (mod p)

which only holds when p is prime and cap <= p.
"""

from __future__ import annotations

from typing import List

from sharemul.config import BINOMIAL_CAPACITY
from sharemul.crypto.field import DEFAULT_FIELD, FieldElement, PrimeField


class BinomialTable:
    """Factorials, inverse factorials and inverses for indices [0, capacity)."""

    def __init__(self, capacity: int = BINOMIAL_CAPACITY, field: PrimeField | None = None) -> None:
        self.field = field or DEFAULT_FIELD
        p = self.field.prime
        if capacity < 2:
            raise ValueError(f"Binomial table capacity must be >= 2, got {capacity}")
        if capacity > p:
            raise ValueError(f"Binomial table capacity {capacity} exceeds modulus {p}")
        self.capacity = capacity

        fac = [0] * capacity
        finv = [0] * capacity
        inv = [0] * capacity
        fac[0] = fac[1] = 1
        finv[0] = finv[1] = 1
        inv[1] = 1
        for i in range(2, capacity):
            fac[i] = fac[i - 1] * i % p
            inv[i] = p - inv[p % i] * (p // i) % p
            finv[i] = finv[i - 1] * inv[i] % p

        self._factorial: List[FieldElement] = [self.field(v) for v in fac]
        self._inverse_factorial: List[FieldElement] = [self.field(v) for v in finv]
        self._inverse: List[FieldElement] = [self.field(v) for v in inv]

    def _check_index(self, i: int) -> None:
        if not 0 <= i < self.capacity:
            raise ValueError(f"Index {i} outside binomial table [0, {self.capacity})")

    def factorial(self, i: int) -> FieldElement:
        self._check_index(i)
        return self._factorial[i]

    def inverse_factorial(self, i: int) -> FieldElement:
        self._check_index(i)
        return self._inverse_factorial[i]

    def inverse(self, i: int) -> FieldElement:
        """Modular inverse of *i*; index 0 holds 0 (no inverse)."""
        self._check_index(i)
        return self._inverse[i]

    def choose(self, n: int, k: int) -> FieldElement:
        """C(n, k) mod p; zero when choosing more than available."""
        if n < 0 or k < 0:
            raise ValueError(f"choose() needs non-negative arguments, got n={n}, k={k}")
        if n < k:
            return self.field.zero
        self._check_index(n)
        return self._factorial[n] * self._inverse_factorial[k] * self._inverse_factorial[n - k]
