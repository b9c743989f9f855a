from __future__ import annotations

import hashlib
import uuid

import pytest

from app.errors import ConfigurationError
from app.shuffle import shuffle_seed, shuffle_with_seed, shuffled_order

SECRET = "server-only-secret"


@pytest.mark.parametrize("size", [0, 1, 2, 10, 36, 50])
def test_output_is_a_permutation(size):
    items = list(range(1, size + 1))

    shuffled = shuffled_order("member-1", SECRET, items)

    assert len(shuffled) == size
    assert sorted(shuffled) == items


def test_permutation_of_catalog_keeps_question_metadata(catalog):
    shuffled = shuffled_order(str(uuid.uuid4()), SECRET, catalog)

    assert sorted(shuffled, key=lambda q: q.question_order) == catalog


def test_same_inputs_give_same_order(catalog):
    results = [shuffled_order("member-42", SECRET, catalog) for _ in range(10)]

    assert all(result == results[0] for result in results)


def test_input_is_not_mutated(catalog):
    before = list(catalog)

    shuffled = shuffled_order("member-1", SECRET, catalog)

    assert catalog == before
    assert shuffled is not catalog


def test_order_is_actually_shuffled(catalog):
    shuffled = shuffled_order("member-1", SECRET, catalog)

    assert [q.question_order for q in shuffled] != list(range(1, 37))


def test_different_participants_get_different_orders(catalog):
    orders = {
        tuple(q.question_order for q in shuffled_order(f"member-{i}", SECRET, catalog))
        for i in range(100)
    }

    assert len(orders) == 100


def test_different_secrets_give_different_orders(catalog):
    orders = {
        tuple(q.question_order for q in shuffled_order("member-1", f"secret-{i}", catalog))
        for i in range(100)
    }

    assert len(orders) == 100


def test_small_inputs_returned_as_copies():
    single = ["only"]
    assert shuffled_order("member-1", SECRET, single) == ["only"]
    assert shuffled_order("member-1", SECRET, []) == []
    assert sorted(shuffled_order("member-1", SECRET, ["a", "b"])) == ["a", "b"]


@pytest.mark.parametrize("secret", [None, "", "   ", "\t\n"])
def test_missing_secret_is_a_configuration_error(catalog, secret):
    with pytest.raises(ConfigurationError):
        shuffled_order("member-1", secret, catalog)


def test_seed_is_first_32_bits_of_sha256():
    expected = int(hashlib.sha256(b"member-1:" + SECRET.encode()).hexdigest()[:8], 16)

    assert shuffle_seed("member-1", SECRET) == expected
    assert 0 <= expected <= 0xFFFFFFFF


def test_shuffle_with_seed_matches_public_entry_point(catalog):
    seed = shuffle_seed("member-7", SECRET)

    assert shuffle_with_seed(catalog, seed) == shuffled_order("member-7", SECRET, catalog)


def test_secret_never_appears_in_output(catalog):
    shuffled = shuffled_order("member-1", SECRET, catalog)

    assert all(SECRET not in repr(q) for q in shuffled)
