"""Sharing polynomials and coefficient sources.

A participant's polynomial is an explicit, inspectable coefficient list
rather than a closure:

    P(x) = c_0 + c_1 x + … + c_{k-1} x^{k-1},   c_0 = secret

Randomness is supplied from outside the engine through a
``CoefficientSource``: a callable ``(participant_id, count)`` returning
``count`` field elements.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Callable, List, Mapping, Sequence, Tuple

from sharemul.crypto.field import FieldElement, PrimeField

CoefficientSource = Callable[[int, int], List[FieldElement]]


@dataclass(frozen=True)
class Polynomial:
    """Polynomial over F_p, coefficients in ascending order of degree."""

    coefficients: Tuple[FieldElement, ...]

    def __post_init__(self) -> None:
        if not self.coefficients:
            raise ValueError("Polynomial needs at least a constant term")

    @classmethod
    def from_secret(
        cls,
        secret: FieldElement,
        randoms: Sequence[FieldElement],
        k: int,
    ) -> "Polynomial":
        """Degree-(k-1) polynomial with constant term *secret*.

        Uses the first ``k-1`` entries of *randoms*.
        """
        if k < 1:
            raise ValueError(f"Invalid threshold: k={k}")
        if len(randoms) < k - 1:
            raise ValueError(
                f"Threshold k={k} needs {k - 1} random coefficients, got {len(randoms)}"
            )
        coeffs = [secret] + [secret.field(c) for c in randoms[: k - 1]]
        return cls(tuple(coeffs))

    @property
    def field(self) -> PrimeField:
        return self.coefficients[0].field

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1

    @property
    def constant_term(self) -> FieldElement:
        return self.coefficients[0]

    def evaluate(self, x: int | FieldElement) -> FieldElement:
        """Evaluate at *x* with Horner's method, O(degree)."""
        x = self.field(x)
        result = self.field.zero
        for c in reversed(self.coefficients):
            result = result * x + c
        return result

    __call__ = evaluate


# ---------------------------------------------------------------------------
# Coefficient sources
# ---------------------------------------------------------------------------


def secure_coefficients(field: PrimeField) -> CoefficientSource:
    """Uniform coefficients from the OS CSPRNG."""

    def source(participant_id: int, count: int) -> List[FieldElement]:
        return [field(secrets.randbelow(field.prime)) for _ in range(count)]

    return source


def fixed_coefficients(
    field: PrimeField,
    table: Mapping[int, Sequence[int]],
) -> CoefficientSource:
    """Replay predetermined coefficients, keyed by participant id."""

    def source(participant_id: int, count: int) -> List[FieldElement]:
        if participant_id not in table:
            raise ValueError(f"No coefficients supplied for participant {participant_id}")
        values = list(table[participant_id])
        if len(values) < count:
            raise ValueError(
                f"Participant {participant_id} needs {count} coefficients, got {len(values)}"
            )
        return [field(v) for v in values[:count]]

    return source
