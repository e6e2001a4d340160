"""Tests for multiplication by resharing (degree reduction)."""

import random
from itertools import combinations

import pytest

from sharemul.crypto import shamir
from sharemul.crypto.field import PrimeField
from sharemul.crypto.polynomial import fixed_coefficients
from sharemul.errors import InvalidParticipants
from sharemul.protocol.multiplication import MultiplicationGadget, check_multiplication_capacity
from sharemul.protocol.params import SessionParams
from sharemul.protocol.session import run_product_session
from sharemul.protocol.transcript import Transcript

F17 = PrimeField(17)
BIG = PrimeField(2**61 - 1)

DEAL = {1: [5], 2: [3]}
RESHARE = {1: [7], 2: [9], 3: [11]}


def _worked_example(transcript=None):
    params = SessionParams(prime=17, threshold=2, participant_ids=[1, 2, 3])
    return run_product_session(
        params,
        {1: 2, 2: 4},
        fixed_coefficients(F17, DEAL),
        fixed_coefficients(F17, RESHARE),
        transcript,
    )


class TestWorkedExample:
    def test_local_products_are_reshared(self):
        exchange = _worked_example()
        secrets = {p.id: p.secret for p in exchange.participants.values()}
        assert secrets == {1: F17(15), 2: F17(1), 3: F17(0)}

    def test_product_shares(self):
        exchange = _worked_example()
        assert exchange.folded_shares() == {1: F17(13), 2: F17(1), 3: F17(6)}

    def test_every_pair_reconstructs_product(self):
        exchange = _worked_example()
        for pair in combinations([1, 2, 3], 2):
            assert exchange.reconstruct(list(pair)) == (2 * 4) % 17

    def test_all_three_reconstruct_product(self):
        assert _worked_example().reconstruct([1, 2, 3]) == 8

    def test_transcript_covers_both_rounds(self):
        transcript = Transcript()
        _worked_example(transcript)
        labels = {e["label"] for e in transcript.entries()}
        assert labels == {"product-input", "reshare"}
        # resharing is all-to-all: 3 senders x 2 other receivers
        reshare_msgs = [e for e in transcript.entries("share") if e["label"] == "reshare"]
        assert len(reshare_msgs) == 6
        assert transcript.verify_chain()


def test_gadget_multiply_from_dealer_shares():
    ids = [1, 2, 3, 4, 5]
    k = 3
    x, y = BIG(123456789), BIG(987654321)
    x_shares = shamir.share(x, ids, k)
    y_shares = shamir.share(y, ids, k)

    exchange = MultiplicationGadget(BIG, k).multiply(x_shares, y_shares)
    for subset in combinations(ids, k):
        assert exchange.reconstruct(list(subset)) == x * y


def test_local_products_alone_need_2k_minus_1_shares():
    """Without resharing, k shares of z_i do not reconstruct x*y."""
    ids = [1, 2, 3]
    x_shares = shamir.share(BIG(11), ids, 2)
    y_shares = shamir.share(BIG(13), ids, 2)
    z = {i: x_shares[i] * y_shares[i] for i in ids}
    assert shamir.reconstruct(z) == 143
    assert shamir.reconstruct({1: z[1], 2: z[2]}) != 143


def test_random_configurations():
    rng = random.Random(99)
    for k in (1, 2, 3, 4):
        n = 2 * k - 1 + rng.randrange(3)
        ids = rng.sample(range(1, 200), n)
        x, y = BIG(rng.randrange(BIG.prime)), BIG(rng.randrange(BIG.prime))
        exchange = MultiplicationGadget(BIG, k).multiply(
            shamir.share(x, ids, k), shamir.share(y, ids, k)
        )
        subset = rng.sample(ids, k)
        assert exchange.reconstruct(subset) == x * y


def test_product_shares_have_threshold_degree():
    """Any k product shares determine the same degree-(k-1) polynomial."""
    ids = [1, 2, 3, 4, 5]
    k = 3
    exchange = MultiplicationGadget(BIG, k).multiply(
        shamir.share(BIG(6), ids, k), shamir.share(BIG(7), ids, k)
    )
    shares = exchange.folded_shares()
    first = shamir.reconstruct({i: shares[i] for i in (1, 2, 3)})
    second = shamir.reconstruct({i: shares[i] for i in (3, 4, 5)})
    assert first == second == 42


def test_fresh_randomness_per_call():
    ids = [1, 2, 3]
    x_shares = shamir.share(BIG(3), ids, 2)
    y_shares = shamir.share(BIG(5), ids, 2)
    gadget = MultiplicationGadget(BIG, 2)
    a = gadget.multiply(x_shares, y_shares).folded_shares()
    b = gadget.multiply(x_shares, y_shares).folded_shares()
    assert a != b


class TestPreconditions:
    def test_capacity_check(self):
        check_multiplication_capacity(3, 2)
        check_multiplication_capacity(5, 3)
        with pytest.raises(InvalidParticipants, match="needs >= 5 participants"):
            check_multiplication_capacity(4, 3)

    def test_gadget_rejects_too_few_participants(self):
        ids = [1, 2, 3, 4]
        x_shares = shamir.share(BIG(3), ids, 3)
        y_shares = shamir.share(BIG(5), ids, 3)
        with pytest.raises(InvalidParticipants):
            MultiplicationGadget(BIG, 3).multiply(x_shares, y_shares)

    def test_mismatched_share_sets(self):
        with pytest.raises(InvalidParticipants):
            MultiplicationGadget(F17, 2).multiply(
                {1: F17(1), 2: F17(2), 3: F17(3)},
                {1: F17(1), 2: F17(2), 4: F17(3)},
            )

    def test_session_needs_two_dealers(self):
        params = SessionParams(prime=17, threshold=2, participant_ids=[1, 2, 3])
        with pytest.raises(ValueError, match="exactly two dealers"):
            run_product_session(params, {1: 2})

    def test_session_capacity(self):
        params = SessionParams(prime=17, threshold=2, participant_ids=[1, 2])
        with pytest.raises(InvalidParticipants):
            run_product_session(params, {1: 2, 2: 4})
