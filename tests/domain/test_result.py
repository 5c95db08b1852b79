"""Tests for call outcome variants."""

import pytest

from domain.provider import ProviderId
from domain.result import LOADING, Error, Loading, Success


def test_success_payload():
    outcome = Success([1, 2])
    assert outcome.is_success
    assert not outcome.is_error
    assert outcome.get_or_none() == [1, 2]


def test_success_is_immutable():
    outcome = Success(1)
    with pytest.raises(AttributeError):
        outcome.data = 2


def test_error_fields():
    """Test Error carries message, provider and optional code."""
    error = Error("boom", ProviderId.PEXELS)
    assert error.is_error
    assert error.code is None
    assert error.get_or_none() is None
    assert not error.is_rate_limited


@pytest.mark.parametrize("code", [403, 429])
def test_error_rate_limited_codes(code):
    assert Error("refused", ProviderId.UNSPLASH, code=code).is_rate_limited


def test_loading_is_singleton():
    assert Loading() is LOADING
    assert LOADING.is_loading
    assert repr(LOADING) == "Loading"
    assert LOADING.get_or_none() is None


def test_map_only_transforms_success():
    """Test map passes Error and Loading through unchanged."""
    error = Error("boom", ProviderId.PIXABAY)
    assert Success(2).map(lambda x: x * 3) == Success(6)
    assert error.map(lambda x: x * 3) is error
    assert LOADING.map(lambda x: x * 3) is LOADING


def test_callbacks():
    seen = []
    Success("data").on_success(seen.append).on_error(seen.append)
    error = Error("boom", ProviderId.WALLHAVEN)
    error.on_success(seen.append).on_error(seen.append)
    assert seen == ["data", error]
