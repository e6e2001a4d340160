"""Multiplication of shared secrets by degree reduction (BGW resharing).

Given degree-(k-1) shares x_i, y_i of x and y held by n parties:

1. Each party computes z_i = x_i · y_i locally.  The z_i lie on a
   polynomial of degree 2(k-1) whose constant term is x·y.
2. Each party re-shares z_i with a fresh degree-(k-1) polynomial h_i
   to every party, itself included.
3. Party j folds what it received with the Lagrange weights λ_i of the
   full party set at 0:

       s_j = Σ_i λ_i · h_i(j)

   Since Σ_i λ_i · z_i = x·y, the s_j are degree-(k-1) shares of x·y.
4. Any k of the s_j reconstruct x·y.

Step 3 needs all n z_i to pin down a degree-2(k-1) polynomial, hence the
precondition n >= 2k - 1.  Fresh randomness is consumed per call.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from sharemul.crypto.field import FieldElement, PrimeField
from sharemul.crypto.polynomial import CoefficientSource, secure_coefficients
from sharemul.errors import InvalidParticipants
from sharemul.party.participant import Participant, lagrange_fold_for
from sharemul.protocol.exchange import ShareExchange
from sharemul.protocol.transcript import Transcript

logger = logging.getLogger(__name__)


def check_multiplication_capacity(n: int, k: int) -> None:
    """Raise unless n parties can absorb a degree-2(k-1) intermediate."""
    if n < 2 * k - 1:
        raise InvalidParticipants(
            f"Multiplication with threshold k={k} needs >= {2 * k - 1} participants, got {n}"
        )


class MultiplicationGadget:
    """One multiplication gate for a fixed field and threshold."""

    def __init__(
        self,
        field: PrimeField,
        threshold: int,
        coefficient_source: Optional[CoefficientSource] = None,
        transcript: Optional[Transcript] = None,
    ) -> None:
        if threshold < 1:
            raise ValueError(f"Invalid threshold: k={threshold}")
        self.field = field
        self.threshold = threshold
        self.coefficient_source = coefficient_source or secure_coefficients(field)
        self.transcript = transcript if transcript is not None else Transcript()

    def reshare_products(self, local_products: Mapping[int, FieldElement]) -> ShareExchange:
        """Steps 2–3: turn local products z_i into degree-(k-1) product shares.

        Returns the resharing exchange; its participants' folded shares are
        the product shares, and ``exchange.reconstruct(ids)`` recovers x·y.
        """
        ids = list(local_products)
        k = self.threshold
        check_multiplication_capacity(len(ids), k)

        resharers = [
            Participant(i, self.field(z), self.coefficient_source(i, k - 1))
            for i, z in local_products.items()
        ]
        exchange = ShareExchange(resharers, k, transcript=self.transcript, label="reshare")
        # Round barrier: every polynomial exists before any share moves.
        exchange.generate_polynomials()
        exchange.distribute()
        exchange.fold(lagrange_fold_for(ids, self.field))
        logger.info("resharing round complete for participants %s (k=%d)", ids, k)
        return exchange

    def multiply(
        self,
        x_shares: Mapping[int, FieldElement],
        y_shares: Mapping[int, FieldElement],
    ) -> ShareExchange:
        """Steps 1–3 starting from shares of x and y keyed by participant id."""
        if set(x_shares) != set(y_shares):
            raise InvalidParticipants(
                f"Share sets differ: {sorted(x_shares)} vs {sorted(y_shares)}"
            )
        products = {i: self.field(x_shares[i]) * self.field(y_shares[i]) for i in x_shares}
        return self.reshare_products(products)
