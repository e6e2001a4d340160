"""Lagrange interpolation weights over F_p.

For evaluation points p_1 … p_m the weight of p_i at ``target_x`` is

    w_i = Π_{j≠i} (target_x - p_j) / (p_i - p_j)

so that Σ w_i · f(p_i) = f(target_x) for every polynomial f of degree
< m.  With ``target_x = 0`` this recovers a shared secret.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping

from sharemul.crypto.field import DEFAULT_FIELD, FieldElement, PrimeField
from sharemul.errors import InvalidParticipants


def weights_at(
    points: Iterable[int],
    field: PrimeField | None = None,
    target_x: int = 0,
) -> Dict[int, FieldElement]:
    """Return ``{point: weight}`` for interpolating at *target_x*.

    Raises ``InvalidParticipants`` for an empty point set or for points
    that coincide modulo p (the denominator would vanish).
    """
    field = field or DEFAULT_FIELD
    ids = list(points)
    if not ids:
        raise InvalidParticipants("Need at least one evaluation point")

    seen: Dict[int, int] = {}
    for p in ids:
        r = field(p).value
        if r in seen:
            raise InvalidParticipants(
                f"Duplicate evaluation point {p} (collides with {seen[r]} mod {field.prime})"
            )
        seen[r] = p

    x = field(target_x)
    weights: Dict[int, FieldElement] = {}
    for i, p_i in enumerate(ids):
        x_i = field(p_i)
        num = field.one
        den = field.one
        for j, p_j in enumerate(ids):
            if i == j:
                continue
            x_j = field(p_j)
            num = num * (x - x_j)
            den = den * (x_i - x_j)
        # A zero denominator still surfaces as DivisionByZero here.
        weights[p_i] = num / den
    return weights


def interpolate(
    values: Mapping[int, FieldElement],
    field: PrimeField | None = None,
    target_x: int = 0,
) -> FieldElement:
    """Evaluate the interpolating polynomial of ``{x: f(x)}`` at *target_x*."""
    if not values:
        raise InvalidParticipants("Need at least one point to interpolate")
    if field is None:
        field = next(iter(values.values())).field
    weights = weights_at(values.keys(), field, target_x)
    result = field.zero
    for x, w in weights.items():
        result = result + w * values[x]
    return result
