from __future__ import annotations

from typing import Optional, Protocol

from .model import LibrarySettings


class SettingsRepository(Protocol):
    def get(self) -> Optional[LibrarySettings]:
        raise NotImplementedError

    def save(self, settings: LibrarySettings) -> None:
        raise NotImplementedError
