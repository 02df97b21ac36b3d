"""Tests for host URL parsing."""

from __future__ import annotations

import pytest

from mfprofiles.urls import INVALID_URL, validate_and_parse_url


def test_full_url_is_split() -> None:
    result = validate_and_parse_url("https://lpar1.example.com:1443/zosmf")

    assert result.valid is True
    assert result.protocol == "https"
    assert result.host == "lpar1.example.com"
    assert result.port == 1443


def test_missing_port_is_reported_as_zero() -> None:
    result = validate_and_parse_url("http://lpar1.example.com")

    assert result.valid is True
    assert result.port == 0


def test_explicit_https_port_is_kept() -> None:
    result = validate_and_parse_url("https://example.com:443")

    assert result.valid is True
    assert result.protocol == "https"
    assert result.host == "example.com"
    assert result.port == 443


@pytest.mark.parametrize(
    "value",
    ["", "not a url", "lpar1.example.com", "https://", "https://lpar1.example.com:notaport", "https://host:99999"],
)
def test_invalid_urls_are_rejected(value: str) -> None:
    assert validate_and_parse_url(value) == INVALID_URL
