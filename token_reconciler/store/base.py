"""Interface to the host platform's credential stores."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class ConfigurationScope(Enum):
    """Settings layers a plaintext value can be written to."""
    GLOBAL = "global"
    WORKSPACE = "workspace"
    WORKSPACE_FOLDER = "workspace_folder"


class TokenStore(ABC):
    """
    Secret store plus plaintext settings, owned by the host platform.

    Secret access is asynchronous and may be eventually consistent after a
    write from the same process. Setting reads are synchronous but reflect a
    layered configuration that can lag behind its own writes.
    """

    @abstractmethod
    async def secret_get(self, key: str) -> Optional[str]:
        """Read a secret, or None when absent."""
        pass

    @abstractmethod
    async def secret_set(self, key: str, value: str) -> None:
        """Store or overwrite a secret."""
        pass

    @abstractmethod
    async def secret_delete(self, key: str) -> None:
        """Remove a secret."""
        pass

    @abstractmethod
    def setting_get(self, key: str) -> Optional[str]:
        """Read the effective plaintext setting."""
        pass

    @abstractmethod
    async def setting_set(self, key: str, value: Optional[str],
                          scope: ConfigurationScope = ConfigurationScope.GLOBAL) -> None:
        """Write a plaintext setting at the given scope."""
        pass
