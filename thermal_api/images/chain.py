"""Máquina de estados de la cadena de resolución de imágenes.

Empieza en DIRECT; un error de carga o un timeout por intento (5 s) sin
señal de éxito avanza al siguiente modo. IFRAME es el último modo: se
asume renderizable, pero si también falla o vence su timeout la cadena
pasa a UNAVAILABLE y el llamador debe ofrecer el enlace original.

Reabrir una imagen (la misma u otra) reinicia en DIRECT. Cada apertura
genera un número de intento; los eventos con un intento viejo se ignoran.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Optional

from ..metrics import IMAGE_CHAIN_OUTCOMES
from .resolver import MODE_ORDER, AccessMode, resolve_image_url

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPT_TIMEOUT_SECONDS = 5.0


class ChainStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    UNAVAILABLE = "unavailable"


class ImageResolutionChain:
    def __init__(
        self,
        attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._attempt_timeout = attempt_timeout
        self._clock = clock
        self._ref: Optional[str] = None
        self._mode_index = 0
        self._status = ChainStatus.IDLE
        self._attempt = 0
        self._started_at = 0.0

    # --- estado -------------------------------------------------------

    @property
    def ref(self) -> Optional[str]:
        return self._ref

    @property
    def status(self) -> ChainStatus:
        return self._status

    @property
    def attempt(self) -> int:
        return self._attempt

    @property
    def mode(self) -> Optional[AccessMode]:
        if self._status in (ChainStatus.IDLE, ChainStatus.UNAVAILABLE):
            return None
        return MODE_ORDER[self._mode_index]

    @property
    def url(self) -> Optional[str]:
        mode = self.mode
        if mode is None:
            return None
        return resolve_image_url(self._ref, mode)

    @property
    def fallback_link(self) -> Optional[str]:
        """Enlace original para abrir manualmente cuando no hay modo que funcione."""
        if self._status is ChainStatus.UNAVAILABLE:
            return self._ref
        return None

    @property
    def is_terminal(self) -> bool:
        if self._status in (ChainStatus.LOADED, ChainStatus.UNAVAILABLE):
            return True
        return self.mode is AccessMode.IFRAME

    # --- eventos ------------------------------------------------------

    def open(self, ref: str) -> int:
        self._ref = ref
        self._mode_index = 0
        self._status = ChainStatus.LOADING
        self._attempt += 1
        self._started_at = self._clock()
        return self._attempt

    def loaded(self, attempt: Optional[int] = None) -> None:
        if not self._accepts(attempt):
            return
        self._status = ChainStatus.LOADED
        IMAGE_CHAIN_OUTCOMES.labels(mode=MODE_ORDER[self._mode_index].value).inc()

    def failed(self, attempt: Optional[int] = None) -> None:
        if not self._accepts(attempt):
            return
        self._advance("error")

    def timed_out(self, attempt: Optional[int] = None) -> None:
        if not self._accepts(attempt):
            return
        self._advance("timeout")

    def check_timeout(self) -> bool:
        """Avanza si el intento actual superó su timeout. True si avanzó."""
        if self._status is not ChainStatus.LOADING:
            return False
        if self._clock() - self._started_at < self._attempt_timeout:
            return False
        self._advance("timeout")
        return True

    def _accepts(self, attempt: Optional[int]) -> bool:
        if self._status is not ChainStatus.LOADING:
            return False
        return attempt is None or attempt == self._attempt

    def _advance(self, reason: str) -> None:
        current = MODE_ORDER[self._mode_index]
        if self._mode_index + 1 >= len(MODE_ORDER):
            self._status = ChainStatus.UNAVAILABLE
            IMAGE_CHAIN_OUTCOMES.labels(mode="unavailable").inc()
            logger.warning("[IMAGES] chain exhausted after %s (%s)", current.value, reason)
            return

        self._mode_index += 1
        self._started_at = self._clock()
        logger.info(
            "[IMAGES] %s on %s, falling back to %s",
            reason, current.value, MODE_ORDER[self._mode_index].value,
        )
