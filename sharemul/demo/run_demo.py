#!/usr/bin/env python3
"""sharemul end-to-end demo over Z_17.

Usage:
    python -m sharemul.demo.run_demo

The script:
1. Participants 1 and 2 share secrets 2 and 4 (threshold 2); participant
   3 only receives.
2. Everyone folds by sum; every pair reconstructs 2 + 4 = 6.
3. The same dealing is folded by product, giving local shares of 2 * 4
   on a degree-2 polynomial.
4. Each participant reshares its local product; every pair reconstructs
   2 * 4 = 8.
5. Prints the transcript head and checks the hash chain.

Random coefficients are pinned so the printed shares can be checked by
hand.
"""

from __future__ import annotations

import logging
from itertools import combinations

from sharemul.config import DEMO_PRIME, LOG_LEVEL
from sharemul.crypto.polynomial import fixed_coefficients
from sharemul.protocol.exchange import ShareExchange
from sharemul.protocol.params import SessionParams
from sharemul.protocol.session import run_additive_session, run_product_session
from sharemul.protocol.transcript import Transcript

SECRETS = {1: 2, 2: 4}
DEAL_COEFFICIENTS = {1: [5], 2: [3], 3: [7]}
RESHARE_COEFFICIENTS = {1: [7], 2: [9], 3: [11]}


def banner(msg: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {msg}")
    print(f"{'='*60}")


def show(exchange: ShareExchange, op: str) -> None:
    for p in exchange.participants.values():
        print(f"   {p!r}")
    for pair in combinations(exchange.ids, exchange.threshold):
        value = exchange.reconstruct(list(pair))
        print(f"   {list(pair)}  s_1 {op} s_2 = {value}")


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL)
    params = SessionParams(prime=DEMO_PRIME, threshold=2, participant_ids=[1, 2, 3])
    field = params.field
    transcript = Transcript()

    banner(f"1) Additive sharing over Z_{params.prime}")
    summed = run_additive_session(
        params, SECRETS, fixed_coefficients(field, DEAL_COEFFICIENTS), transcript
    )
    show(summed, "+")

    banner(f"2) Multiplication by resharing over Z_{params.prime}")
    product = run_product_session(
        params,
        SECRETS,
        fixed_coefficients(field, DEAL_COEFFICIENTS),
        fixed_coefficients(field, RESHARE_COEFFICIENTS),
        transcript,
    )
    show(product, "*")

    banner("3) Transcript")
    print(f"   entries:     {len(transcript)}")
    print(f"   head:        {transcript.head[:16]}…")
    print(f"   chain valid: {transcript.verify_chain()}")


if __name__ == "__main__":
    main()
