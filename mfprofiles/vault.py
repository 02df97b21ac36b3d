"""Secure credential storage and the check reporting whether it is in use."""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Protocol, runtime_checkable

PLAINTEXT_MARKERS = frozenset({"", "false", "none", "off"})


class CredentialVaultError(RuntimeError):
    """Raised when the credential vault cannot be reached or read."""


@runtime_checkable
class CredentialVault(Protocol):
    """Protocol implemented by secure-value stores (OS keychains etc.)."""

    def is_available(self) -> bool:
        """Return whether the vault can currently be used."""

    def load(self, config_path: str) -> Mapping[str, Any]:
        """Return secure values for a config file, keyed by JSON path."""

    def save(self, config_path: str, json_path: str, value: Any) -> None:
        """Store a single secure value."""


class InMemoryCredentialVault:
    """Vault kept in process memory; used for tests and embedding hosts."""

    def __init__(self, values: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._values: dict[str, MutableMapping[str, Any]] = {
            path: dict(entries) for path, entries in (values or {}).items()
        }

    def is_available(self) -> bool:
        return True

    def load(self, config_path: str) -> Mapping[str, Any]:
        return dict(self._values.get(config_path, {}))

    def save(self, config_path: str, json_path: str, value: Any) -> None:
        self._values.setdefault(config_path, {})[json_path] = value


def credential_manager_enabled(credential_manager: str | bool | None) -> bool:
    """Interpret the ``credential_manager`` override from app config."""

    if credential_manager is None or credential_manager is False:
        return False
    if credential_manager is True:
        return True
    return credential_manager.strip().lower() not in PLAINTEXT_MARKERS


class CredentialSecurityCheck:
    """Reports whether secure values are vault-backed rather than plaintext.

    Errors raised by the vault propagate; callers decide how to fail.
    """

    def __init__(self, credential_manager: str | bool | None, vault: CredentialVault | None) -> None:
        self._credential_manager = credential_manager
        self._vault = vault

    @property
    def vault(self) -> CredentialVault | None:
        return self._vault

    def is_secured(self) -> bool:
        if not credential_manager_enabled(self._credential_manager) or self._vault is None:
            return False
        try:
            return bool(self._vault.is_available())
        except CredentialVaultError:
            raise
        except Exception as exc:
            raise CredentialVaultError(f"Credential vault availability check failed: {exc}") from exc


__all__ = [
    "CredentialSecurityCheck",
    "CredentialVault",
    "CredentialVaultError",
    "InMemoryCredentialVault",
    "credential_manager_enabled",
]
