"""Tests for the credential vault and the security check."""

from __future__ import annotations

import pytest

from mfprofiles.vault import (
    CredentialSecurityCheck,
    CredentialVault,
    CredentialVaultError,
    InMemoryCredentialVault,
    credential_manager_enabled,
)


class _UnavailableVault(InMemoryCredentialVault):
    def is_available(self) -> bool:
        return False


class _BrokenVault(InMemoryCredentialVault):
    def is_available(self) -> bool:
        raise OSError("no keyring daemon")


@pytest.mark.parametrize("value", [None, False, "", "false", "None", " off "])
def test_plaintext_markers_disable_credential_manager(value: str | bool | None) -> None:
    assert credential_manager_enabled(value) is False


@pytest.mark.parametrize("value", [True, "@mfprofiles/secure", "keychain"])
def test_named_credential_manager_is_enabled(value: str | bool) -> None:
    assert credential_manager_enabled(value) is True


def test_in_memory_vault_round_trips_values() -> None:
    vault = InMemoryCredentialVault()

    vault.save("memory://layer0", "profiles.base.properties.tokenValue", "jwt")

    assert isinstance(vault, CredentialVault)
    assert vault.load("memory://layer0") == {"profiles.base.properties.tokenValue": "jwt"}
    assert vault.load("memory://other") == {}


def test_security_check_reports_vault_availability() -> None:
    assert CredentialSecurityCheck("@mfprofiles/secure", InMemoryCredentialVault()).is_secured() is True
    assert CredentialSecurityCheck("@mfprofiles/secure", _UnavailableVault()).is_secured() is False
    assert CredentialSecurityCheck("@mfprofiles/secure", None).is_secured() is False
    assert CredentialSecurityCheck(False, InMemoryCredentialVault()).is_secured() is False


def test_security_check_wraps_vault_failures() -> None:
    check = CredentialSecurityCheck("@mfprofiles/secure", _BrokenVault())

    with pytest.raises(CredentialVaultError, match="no keyring daemon"):
        check.is_secured()
