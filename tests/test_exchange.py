"""Tests for share distribution and reconstruction."""

import random
from itertools import combinations

import pytest

from sharemul.crypto.field import PrimeField
from sharemul.crypto.polynomial import fixed_coefficients
from sharemul.errors import InvalidParticipants, PrecursorMissing
from sharemul.party.participant import Participant, additive_fold
from sharemul.protocol.exchange import ShareExchange
from sharemul.protocol.params import SessionParams
from sharemul.protocol.session import run_additive_session

F17 = PrimeField(17)


def _worked_example():
    """Participants 1 and 2 deal 2 and 4 (mod 17); participant 3 helps."""
    participants = [
        Participant(1, F17(2), [F17(5)]),
        Participant(2, F17(4), [F17(3)]),
        Participant(3, F17(6), [F17(7)]),
    ]
    exchange = ShareExchange(participants, threshold=2)
    exchange.generate_polynomials([1, 2])
    exchange.distribute()
    exchange.fold(additive_fold)
    return exchange


def test_worked_example_folded_shares():
    exchange = _worked_example()
    assert exchange.folded_shares() == {1: F17(14), 2: F17(5), 3: F17(13)}


def test_worked_example_every_pair_reconstructs_sum():
    exchange = _worked_example()
    for pair in combinations([1, 2, 3], 2):
        assert exchange.reconstruct(list(pair)) == 6


def test_two_participant_round_trip():
    participants = [Participant(1, F17(2), [F17(5)]), Participant(2, F17(4), [F17(3)])]
    exchange = ShareExchange(participants, threshold=2)
    exchange.generate_polynomials()
    exchange.distribute()
    exchange.fold(additive_fold)
    assert exchange.reconstruct([1, 2]) == (2 + 4) % 17


def test_below_threshold_is_not_reliable():
    exchange = _worked_example()
    # A single share is just the folded value itself: 14, not 6.
    assert exchange.reconstruct([1]) == 14
    assert exchange.reconstruct([1]) != exchange.reconstruct([1, 2])


def test_random_sessions_reconstruct_from_any_k_subset():
    rng = random.Random(1234)
    params = SessionParams(threshold=3, participant_ids=[1, 2, 3, 4, 5])
    p = params.prime
    secrets = {i: rng.randrange(p) for i in (1, 2, 4)}
    exchange = run_additive_session(params, secrets)
    expected = sum(secrets.values()) % p
    for subset in combinations(params.participant_ids, 3):
        assert exchange.reconstruct(list(subset)) == expected
    assert exchange.reconstruct([1, 2, 3, 4, 5]) == expected
    # k-1 shares with a 61-bit prime miss the sum with overwhelming probability
    assert exchange.reconstruct([1, 2]) != expected


def test_session_with_fixed_coefficients_matches_worked_example():
    params = SessionParams(prime=17, threshold=2, participant_ids=[1, 2, 3])
    exchange = run_additive_session(
        params, {1: 2, 2: 4}, fixed_coefficients(params.field, {1: [5], 2: [3]})
    )
    assert exchange.folded_shares() == {1: F17(14), 2: F17(5), 3: F17(13)}


def test_transcript_records_messages():
    exchange = _worked_example()
    shares = exchange.transcript.entries("share")
    # dealers 1, 2 -> everyone but themselves
    assert len(shares) == 4
    assert {(e["data"]["sender"], e["data"]["receiver"]) for e in shares} == {
        (1, 2), (1, 3), (2, 1), (2, 3),
    }
    assert exchange.transcript.verify_chain()


class TestErrors:
    def test_duplicate_participant_ids(self):
        with pytest.raises(InvalidParticipants):
            ShareExchange([Participant(1, F17(1)), Participant(1, F17(2))], threshold=1)

    def test_id_congruent_to_zero_is_rejected(self):
        # Participant 17 over Z_17 would be handed P(0) = 2, the dealer's secret.
        dealer = Participant(1, F17(2), [F17(5)])
        with pytest.raises(InvalidParticipants, match=r"0 mod 17"):
            ShareExchange([dealer, Participant(17, F17(0))], threshold=2)
        assert not dealer.has_polynomial

    def test_too_few_participants(self):
        with pytest.raises(InvalidParticipants):
            ShareExchange([Participant(1, F17(1))], threshold=2)

    def test_unknown_reconstruction_id(self):
        exchange = _worked_example()
        with pytest.raises(InvalidParticipants):
            exchange.reconstruct([1, 9])

    def test_reconstruct_before_fold(self):
        participants = [Participant(1, F17(2), [F17(5)]), Participant(2, F17(4), [F17(3)])]
        exchange = ShareExchange(participants, threshold=2)
        exchange.generate_polynomials()
        exchange.distribute()
        with pytest.raises(PrecursorMissing):
            exchange.reconstruct([1, 2])

    def test_distribute_from_dealer_without_polynomial(self):
        participants = [Participant(1, F17(2), [F17(5)]), Participant(2, F17(4), [F17(3)])]
        exchange = ShareExchange(participants, threshold=2)
        with pytest.raises(PrecursorMissing):
            exchange.distribute([1])

    def test_dealer_not_in_session(self):
        params = SessionParams(prime=17, threshold=2, participant_ids=[1, 2, 3])
        with pytest.raises(InvalidParticipants):
            run_additive_session(params, {7: 1})
