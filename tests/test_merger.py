"""Tests for ProfileMerger."""

from __future__ import annotations

import pytest

from mfprofiles.merger import ProfileMerger
from mfprofiles.models import ProfileAttributes, ProfileLocation
from mfprofiles.sources import StaticConfigSource
from mfprofiles.vault import InMemoryCredentialVault

LAYER = {
    "profiles": {
        "sysplex": {
            "properties": {"host": "plex.example.com", "rejectUnauthorized": True},
            "profiles": {
                "zosmf": {"type": "zosmf", "properties": {"port": 443}, "secure": ["user", "password"]},
            },
        },
        "base": {"type": "base", "properties": {"host": "gw.example.com", "encoding": "IBM-1047"}},
    },
    "defaults": {"zosmf": "sysplex.zosmf", "base": "base"},
}


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


async def _source() -> StaticConfigSource:
    vault = InMemoryCredentialVault(
        {
            "memory://layer0": {
                "profiles.sysplex.profiles.zosmf.properties.user": "ibmuser",
                "profiles.sysplex.profiles.zosmf.properties.password": "pa55",
            }
        }
    )
    config = StaticConfigSource([LAYER], vault=vault)
    await config.read_profiles_from_disk()
    return config


def _attrs(name: str, profile_type: str = "zosmf") -> ProfileAttributes:
    return ProfileAttributes(name=name, type=profile_type, location=ProfileLocation(None, ""))


@pytest.mark.anyio
async def test_merge_attributes_resolves_secure_values() -> None:
    source = await _source()
    properties = ProfileMerger().merge_attributes(source, _attrs("sysplex.zosmf"))

    assert properties == {
        "port": 443,
        "user": "ibmuser",
        "password": "pa55",
        "host": "plex.example.com",
        "rejectUnauthorized": True,
        "encoding": "IBM-1047",
    }


@pytest.mark.anyio
async def test_merge_does_not_default_missing_keys() -> None:
    source = await _source()
    properties = ProfileMerger().merge_attributes(source, _attrs("sysplex.zosmf"))

    assert "basePath" not in properties
    assert "protocol" not in properties


@pytest.mark.anyio
async def test_merge_is_repeatable() -> None:
    source = await _source()
    merger = ProfileMerger()

    first = merger.merge_attributes(source, _attrs("sysplex.zosmf"))
    second = merger.merge_attributes(source, _attrs("sysplex.zosmf"))

    assert first == second
    assert first is not second


@pytest.mark.anyio
async def test_unknown_profile_merges_to_empty() -> None:
    source = await _source()
    merger = ProfileMerger()

    assert merger.merge_attributes(source, _attrs("missing")) == {}
    assert merger.resolve(source, _attrs("missing")) is None
    assert merger.resolve(source, _attrs("sysplex.zosmf", "ssh")) is None
