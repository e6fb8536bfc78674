from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class EnvFileRef:
    directory: Path
    filename: str

    @property
    def path(self) -> Path:
        return self.directory / self.filename
