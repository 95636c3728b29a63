from __future__ import annotations

from typing import Mapping, Protocol


class ConfigRepository(Protocol):
    def get_all(self) -> Mapping[str, str]:
        """Return every config key/value pair."""

        raise NotImplementedError
