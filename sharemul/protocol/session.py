"""Whole-session drivers: additive sharing and two-party-secret products.

Dealers are the participants listed in *secrets*; the rest act as
helpers that only receive.  Every participant receives a share from every
dealer, so each participant ends up holding one share per secret.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from sharemul.crypto.polynomial import CoefficientSource, secure_coefficients
from sharemul.errors import InvalidParticipants
from sharemul.party.participant import Participant, additive_fold, multiplicative_fold
from sharemul.protocol.exchange import ShareExchange
from sharemul.protocol.multiplication import MultiplicationGadget, check_multiplication_capacity
from sharemul.protocol.params import SessionParams
from sharemul.protocol.transcript import Transcript

logger = logging.getLogger(__name__)


def _deal(
    params: SessionParams,
    secrets: Mapping[int, int],
    source: CoefficientSource,
    transcript: Transcript,
    label: str,
) -> ShareExchange:
    field = params.field
    k = params.threshold
    unknown = sorted(set(secrets) - set(params.participant_ids))
    if unknown:
        raise InvalidParticipants(f"Dealers {unknown} are not session participants")

    participants = []
    for pid in params.participant_ids:
        if pid in secrets:
            participants.append(Participant(pid, field(secrets[pid]), source(pid, k - 1)))
        else:
            participants.append(Participant(pid, field.zero))
    exchange = ShareExchange(participants, k, transcript=transcript, label=label)
    exchange.generate_polynomials(list(secrets))
    exchange.distribute()
    return exchange


def run_additive_session(
    params: SessionParams,
    secrets: Mapping[int, int],
    source: Optional[CoefficientSource] = None,
    transcript: Optional[Transcript] = None,
) -> ShareExchange:
    """Share every dealer's secret and fold by sum.

    Any ``threshold`` participants then reconstruct Σ secrets.
    """
    if not secrets:
        raise ValueError("Need at least one dealer secret")
    source = source or secure_coefficients(params.field)
    transcript = transcript if transcript is not None else Transcript()
    exchange = _deal(params, secrets, source, transcript, label="sum")
    exchange.fold(additive_fold)
    logger.info("additive session dealt by %s over %s", sorted(secrets), params.participant_ids)
    return exchange


def run_product_session(
    params: SessionParams,
    secrets: Mapping[int, int],
    deal_source: Optional[CoefficientSource] = None,
    reshare_source: Optional[CoefficientSource] = None,
    transcript: Optional[Transcript] = None,
) -> ShareExchange:
    """Multiply two dealers' secrets on shares.

    Every participant folds its two shares by product (the local z_i),
    then the multiplication gadget reshares the products.  The returned
    exchange holds the product shares.
    """
    if len(secrets) != 2:
        raise ValueError(f"Product session needs exactly two dealers, got {len(secrets)}")
    check_multiplication_capacity(len(params.participant_ids), params.threshold)
    field = params.field
    deal_source = deal_source or secure_coefficients(field)
    transcript = transcript if transcript is not None else Transcript()

    dealing = _deal(params, secrets, deal_source, transcript, label="product-input")
    local_products = dealing.fold(multiplicative_fold)

    gadget = MultiplicationGadget(field, params.threshold, reshare_source, transcript)
    return gadget.reshare_products(local_products)
