import pytest

from app.models import Counter, TOKEN_COUNTER
from app.extensions import db
from app.services import token_service


def test_current_token_defaults_to_zero(app):
    assert token_service.current_token() == 0


def test_first_token_is_one(app):
    assert token_service.next_token() == 1
    assert token_service.current_token() == 1


def test_tokens_are_distinct_and_increasing(app):
    token_service.reset_counter(41)
    start = token_service.current_token()

    tokens = [token_service.next_token() for _ in range(10)]

    assert len(set(tokens)) == 10
    assert all(t > start for t in tokens)
    assert tokens == sorted(tokens)
    assert token_service.current_token() == tokens[-1]


def test_counter_is_a_single_row(app):
    for _ in range(3):
        token_service.next_token()
    assert Counter.query.count() == 1
    assert db.session.get(Counter, TOKEN_COUNTER).current == 3


def test_current_token_does_not_advance(app):
    token_service.next_token()
    token_service.current_token()
    token_service.current_token()
    assert token_service.next_token() == 2


def test_reset_counter_overwrites_value(app):
    token_service.next_token()
    token_service.next_token()

    assert token_service.reset_counter(100) == 100
    assert token_service.current_token() == 100
    assert token_service.next_token() == 101


def test_reset_counter_creates_missing_row(app):
    token_service.reset_counter(5)
    assert token_service.next_token() == 6


def test_reset_counter_rejects_negative(app):
    with pytest.raises(ValueError):
        token_service.reset_counter(-1)
