"""A single party in a sharing session.

Each participant owns its secret, its sharing polynomial and the map of
shares it has received.  Other participants only interact with it through
``give_share`` / ``receive_share``, which stand in for network messages.

Lifecycle::

    CREATED ──generate_polynomial──▶ POLYNOMIAL_GENERATED
       │                                   │
       └────────receive_share──────────────┴──▶ SHARES_RECEIVING ──fold_shares──▶ FOLDED

A participant that never deals (a "helper") may skip the polynomial and
only receive.
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from sharemul.crypto.field import FieldElement
from sharemul.crypto.lagrange import weights_at
from sharemul.crypto.polynomial import Polynomial
from sharemul.errors import InvalidParticipants, PolynomialAlreadyGenerated, PrecursorMissing

logger = logging.getLogger(__name__)

Reduction = Callable[[Mapping[int, FieldElement]], FieldElement]


class ParticipantState(str, Enum):
    CREATED = "created"
    POLYNOMIAL_GENERATED = "polynomial_generated"
    SHARES_RECEIVING = "shares_receiving"
    FOLDED = "folded"


class Participant:
    """A party identified by a positive integer id."""

    def __init__(
        self,
        participant_id: int,
        secret: FieldElement,
        coefficients: Sequence[FieldElement] = (),
    ) -> None:
        if participant_id < 1:
            raise ValueError(f"Participant id must be a positive integer, got {participant_id}")
        self.id = participant_id
        self.secret = secret
        self.coefficients: List[FieldElement] = [secret.field(c) for c in coefficients]
        self.state = ParticipantState.CREATED
        self._polynomial: Optional[Polynomial] = None
        self._shares: Dict[int, FieldElement] = {}
        self._folded_share: Optional[FieldElement] = None

    # ---- read-only views ----

    @property
    def field(self):
        return self.secret.field

    @property
    def polynomial(self) -> Polynomial:
        if self._polynomial is None:
            raise PrecursorMissing(f"Participant {self.id} has not generated a polynomial")
        return self._polynomial

    @property
    def has_polynomial(self) -> bool:
        return self._polynomial is not None

    @property
    def shares(self) -> Mapping[int, FieldElement]:
        """Received shares keyed by sender id (read-only view)."""
        return MappingProxyType(self._shares)

    @property
    def folded_share(self) -> FieldElement:
        if self._folded_share is None:
            raise PrecursorMissing(f"Participant {self.id} has not folded its shares")
        return self._folded_share

    # ---- protocol ----

    def generate_polynomial(self, k: int) -> Polynomial:
        """Fix the degree-(k-1) polynomial and record the self-share P(id)."""
        if self._polynomial is not None:
            raise PolynomialAlreadyGenerated(f"Participant {self.id} already has a polynomial")
        self._polynomial = Polynomial.from_secret(self.secret, self.coefficients, k)
        self._shares[self.id] = self._polynomial.evaluate(self.id)
        self.state = ParticipantState.POLYNOMIAL_GENERATED
        return self._polynomial

    def give_share(self, target_id: int) -> FieldElement:
        """Return P(target_id).  No side effects."""
        return self.polynomial.evaluate(target_id)

    def receive_share(self, other: "Participant") -> None:
        """Ask *other* for its share at our id and store it under ``other.id``."""
        self._shares[other.id] = other.give_share(self.id)
        # A new share makes any earlier fold stale.
        self._folded_share = None
        self.state = ParticipantState.SHARES_RECEIVING
        logger.debug("participant %d received share from %d", self.id, other.id)

    def fold_shares(self, reduction: Reduction) -> FieldElement:
        """Reduce the received shares to a single value with *reduction*.

        *reduction* sees the whole ``{sender: share}`` mapping and must not
        depend on iteration order.
        """
        if not self._shares:
            raise PrecursorMissing(f"Participant {self.id} has no shares to fold")
        self._folded_share = reduction(self.shares)
        self.state = ParticipantState.FOLDED
        return self._folded_share

    def __repr__(self) -> str:
        coeffs = [int(c) for c in self.coefficients]
        shares = {k: int(v) for k, v in sorted(self._shares.items())}
        return (
            f"Participant(id={self.id}, secret={self.secret}, coefficients={coeffs}, "
            f"shares={shares}, folded_share={self._folded_share}, state={self.state.value})"
        )


# ---------------------------------------------------------------------------
# Stock reductions
# ---------------------------------------------------------------------------


def additive_fold(shares: Mapping[int, FieldElement]) -> FieldElement:
    """Sum of all received shares."""
    if not shares:
        raise PrecursorMissing("No shares to sum")
    values = iter(shares.values())
    total = next(values)
    for v in values:
        total = total + v
    return total


def multiplicative_fold(shares: Mapping[int, FieldElement]) -> FieldElement:
    """Product of all received shares."""
    if not shares:
        raise PrecursorMissing("No shares to multiply")
    values = iter(shares.values())
    total = next(values)
    for v in values:
        total = total * v
    return total


def lagrange_fold(weights: Mapping[int, FieldElement]) -> Reduction:
    """Build a reduction computing Σ weights[sender] · share.

    Every weighted sender must have delivered its share, and no share may
    come from a sender outside the weighted group.
    """

    def reduction(shares: Mapping[int, FieldElement]) -> FieldElement:
        unexpected = set(shares) - set(weights)
        if unexpected:
            raise InvalidParticipants(f"No Lagrange weight for senders {sorted(unexpected)}")
        pending = set(weights) - set(shares)
        if pending:
            raise PrecursorMissing(f"Still waiting for shares from {sorted(pending)}")
        total = None
        for sender, value in shares.items():
            term = weights[sender] * value
            total = term if total is None else total + term
        return total

    return reduction


def lagrange_fold_for(sender_ids: Sequence[int], field) -> Reduction:
    """``lagrange_fold`` with the weights of *sender_ids* at x = 0."""
    return lagrange_fold(weights_at(sender_ids, field))
