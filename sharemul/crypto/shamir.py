"""Dealer-style Shamir (K-of-N) secret sharing over F_p.

API
---
share(secret, ids, k)  -> {id: P(id)}
reconstruct(shares)    -> secret   (needs >= k shares)
"""

from __future__ import annotations

from typing import Dict, Mapping, Sequence

from sharemul.crypto.field import FieldElement
from sharemul.crypto.lagrange import interpolate
from sharemul.crypto.polynomial import CoefficientSource, Polynomial, secure_coefficients
from sharemul.errors import InvalidParticipants

DEALER_ID = 0


def share(
    secret: FieldElement,
    participant_ids: Sequence[int],
    k: int,
    source: CoefficientSource | None = None,
) -> Dict[int, FieldElement]:
    """Split *secret* into one share per id with threshold *k*.

    A random polynomial P of degree k-1 with P(0) = secret is drawn from
    *source* (keyed by ``DEALER_ID``); share i is P(i).
    """
    n = len(participant_ids)
    if k < 1 or k > n:
        raise ValueError(f"Invalid threshold: k={k}, n={n}")
    if len({secret.field(i).value for i in participant_ids}) != n:
        raise InvalidParticipants(f"Participant ids must be distinct: {list(participant_ids)}")
    if source is None:
        source = secure_coefficients(secret.field)

    poly = Polynomial.from_secret(secret, source(DEALER_ID, k - 1), k)
    return {i: poly.evaluate(i) for i in participant_ids}


def reconstruct(shares: Mapping[int, FieldElement]) -> FieldElement:
    """Reconstruct the secret from ``{id: share}`` by interpolating at 0."""
    if not shares:
        raise ValueError("Need at least one share")
    return interpolate(shares, target_x=0)
