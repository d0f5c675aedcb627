"""
Secret store clients: the only code that reads the expected API credentials.

Every lookup is a fresh fetch; nothing is cached between requests.
"""

import logging
import os
import re
from typing import Optional, Protocol

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.identity.aio import DefaultAzureCredential
from azure.keyvault.secrets.aio import SecretClient

from txt2json.config import SecretStoreConfig
from txt2json.errors import SecretStoreError

logger = logging.getLogger(__name__)


class SecretStore(Protocol):
    async def get_secret(self, name: str) -> Optional[str]:
        """Return the secret value, or None when the secret does not exist."""
        ...

    async def close(self) -> None:
        ...


class KeyVaultSecretStore:
    """
    Azure Key Vault backed store.

    Authenticates with DefaultAzureCredential (managed identity, workload
    identity, environment or CLI login), which refreshes its own tokens.
    One SecretClient is shared by all requests and closed at shutdown.
    """

    def __init__(self, config: SecretStoreConfig) -> None:
        if not config.url:
            raise ValueError("SECRET_STORE_URL is required for the keyvault secret store backend")
        self._credential = DefaultAzureCredential()
        self._client = SecretClient(
            vault_url=config.url,
            credential=self._credential,
            connection_timeout=config.timeout_seconds,
            read_timeout=config.timeout_seconds,
        )

    async def get_secret(self, name: str) -> Optional[str]:
        try:
            secret = await self._client.get_secret(name)
        except ResourceNotFoundError:
            logger.warning("Secret '%s' not found in Key Vault", name)
            return None
        except AzureError as exc:
            logger.error("Failed to retrieve secret '%s' from Key Vault: %s", name, exc)
            raise SecretStoreError(f"Key Vault lookup failed for '{name}'") from exc
        return secret.value

    async def close(self) -> None:
        await self._client.close()
        await self._credential.close()


class EnvSecretStore:
    """Reads secrets from environment variables: api-username → SECRET_API_USERNAME."""

    def __init__(self, environ: Optional[dict] = None) -> None:
        self._environ = os.environ if environ is None else environ

    @staticmethod
    def variable_name(name: str) -> str:
        return "SECRET_" + re.sub(r"[^A-Za-z0-9]", "_", name).upper()

    async def get_secret(self, name: str) -> Optional[str]:
        return self._environ.get(self.variable_name(name))

    async def close(self) -> None:
        pass


def build_secret_store(config: SecretStoreConfig) -> SecretStore:
    """Pick the secret store backend named in the configuration."""
    if config.backend == "env":
        logger.info("Using environment-backed secret store")
        return EnvSecretStore()
    if config.backend == "keyvault":
        logger.info("Using Azure Key Vault secret store at %s", config.url)
        return KeyVaultSecretStore(config)
    raise ValueError(f"Unknown secret store backend: {config.backend}")
