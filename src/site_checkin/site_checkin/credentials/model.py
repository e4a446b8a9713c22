from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Credential:
    """Opaque identity token printed on a worker's QR code."""

    value: str

    def __str__(self) -> str:
        return self.value
