"""Profile catalog, merge and credential resolution for mainframe explorers."""

__version__ = "0.1.0"

from .cache import ProfileCache, ProfileCatalog, ProfileNotFoundError  # noqa: E402
from .context import ExplorerContext  # noqa: E402
from .layers import ConfigSourceError, UnknownProfileError  # noqa: E402
from .merger import ProfileMerger  # noqa: E402
from .models import (  # noqa: E402
    BASE_PROFILE_TYPE,
    DEFAULT_PROFILE_TYPE,
    TOKEN_TYPE_APIML,
    MergedProfile,
    ProfileAttributes,
    UrlValidation,
    ValidationStatus,
)
from .refresh_queue import RefreshQueue  # noqa: E402
from .sources import ConfigSource, StaticConfigSource, TomlConfigSource  # noqa: E402
from .tokens import TokenInheritancePolicy  # noqa: E402
from .vault import CredentialVault, CredentialVaultError, InMemoryCredentialVault  # noqa: E402

__all__ = [
    "BASE_PROFILE_TYPE",
    "ConfigSource",
    "ConfigSourceError",
    "CredentialVault",
    "CredentialVaultError",
    "DEFAULT_PROFILE_TYPE",
    "ExplorerContext",
    "InMemoryCredentialVault",
    "MergedProfile",
    "ProfileAttributes",
    "ProfileCache",
    "ProfileCatalog",
    "ProfileMerger",
    "ProfileNotFoundError",
    "RefreshQueue",
    "StaticConfigSource",
    "TOKEN_TYPE_APIML",
    "TokenInheritancePolicy",
    "TomlConfigSource",
    "UnknownProfileError",
    "UrlValidation",
    "ValidationStatus",
    "__version__",
]
