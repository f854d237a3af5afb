from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class WorkspaceContext:
    payload: Dict[str, Any]

    def get(self, key, default=None):
        return self.payload.get(key, default)

    def __getitem__(self, key):
        return self.payload[key]

    @property
    def mood(self) -> str:
        return self.payload.get("mood", "motivated")

    @property
    def signed_in(self) -> bool:
        return bool(self.payload.get("signed_in"))
