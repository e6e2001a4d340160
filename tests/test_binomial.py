"""Tests for the precomputed binomial table."""

import math

import pytest

from sharemul.crypto.binomial import BinomialTable
from sharemul.crypto.field import PrimeField


def test_matches_direct_computation_small_field():
    p = 17
    table = BinomialTable(17, PrimeField(p))
    for n in range(17):
        for k in range(n + 1):
            assert table.choose(n, k) == math.comb(n, k) % p, (n, k)


def test_matches_direct_computation_large_field():
    p = 1_000_000_007
    table = BinomialTable(200, PrimeField(p))
    for n in (0, 1, 2, 10, 57, 199):
        for k in range(0, n + 1, 3):
            assert table.choose(n, k) == math.comb(n, k) % p


def test_choose_more_than_available_is_zero():
    table = BinomialTable(10, PrimeField(17))
    assert table.choose(3, 5) == 0
    assert table.choose(0, 1) == 0


def test_choose_zero_is_one():
    table = BinomialTable(17, PrimeField(17))
    for n in range(17):
        assert table.choose(n, 0) == 1


def test_seeded_entries():
    table = BinomialTable(5, PrimeField(17))
    assert table.factorial(0) == 1
    assert table.factorial(1) == 1
    assert table.inverse_factorial(0) == 1
    assert table.inverse_factorial(1) == 1
    assert table.inverse(1) == 1


def test_table_recurrences():
    f = PrimeField(101)
    table = BinomialTable(101, f)
    for i in range(1, 101):
        assert table.factorial(i) == table.factorial(i - 1) * i
        assert table.inverse(i) * i == f.one
        assert table.factorial(i) * table.inverse_factorial(i) == f.one


def test_capacity_bounds():
    with pytest.raises(ValueError):
        BinomialTable(1, PrimeField(17))
    with pytest.raises(ValueError):
        BinomialTable(18, PrimeField(17))


def test_index_outside_table():
    table = BinomialTable(10, PrimeField(17))
    with pytest.raises(ValueError):
        table.choose(10, 2)
    with pytest.raises(ValueError):
        table.choose(-1, 0)
