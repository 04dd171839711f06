"""Token de generación por fetch.

Cada refresco de una vista emite un token nuevo; al volver la respuesta
solo se aplica si su token sigue siendo el último emitido. Así dos
refrescos solapados no pisan el estado en desorden.
"""

from __future__ import annotations


class FetchGeneration:
    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest
