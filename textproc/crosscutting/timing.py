# textproc/crosscutting/timing.py
"""
Timer monotónico para latencias de request y de cada llamada al transformador.

Segundos para los histogramas Prometheus, milisegundos redondeados para los logs.
"""

from __future__ import annotations

import time
from typing import Optional


class Timer:
    __slots__ = ("_started", "_stopped")

    def __init__(self) -> None:
        self._started: Optional[float] = None
        self._stopped: Optional[float] = None

    def start(self) -> "Timer":
        self._started = time.perf_counter()
        self._stopped = None
        return self

    def stop(self) -> "Timer":
        if self._started is None:
            raise RuntimeError("Timer no iniciado")
        if self._stopped is None:
            self._stopped = time.perf_counter()
        return self

    @property
    def elapsed_seconds(self) -> float:
        """Hasta stop(); si sigue corriendo, hasta ahora."""
        if self._started is None:
            return 0.0
        until = time.perf_counter() if self._stopped is None else self._stopped
        return until - self._started

    @property
    def elapsed_ms(self) -> float:
        return round(self.elapsed_seconds * 1000, 2)
