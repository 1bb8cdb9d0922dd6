"""
Execution timing utilities.

Provides wall-clock timing of the stages of a decomposition (reduction to
a condensed form, iterative refinement, factor accumulation). Timings are
attached to every Result envelope.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Accumulating stage timer.

    Usage:
        timer = Timer()
        timer.start()

        with timer.section('hessenberg'):
            hess = reduce_to_hessenberg(a)

        with timer.section('francis_iterations'):
            params = francis_qr(hess.h, hess.q, criteria)

        timer.stop()
        result = timer.result()
        # {'total_seconds': 0.05, 'hessenberg': 0.01, 'francis_iterations': 0.04}
    """

    def __init__(self) -> None:
        self._sections: dict[str, float] = {}
        self._start_time: float | None = None
        self._total: float | None = None

    def start(self) -> None:
        """Start the overall timer."""
        self._start_time = time.perf_counter()

    def stop(self) -> None:
        """Stop the overall timer."""
        if self._start_time is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._start_time

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time a named section.

        Args:
            name: Section identifier (used as key in result dict)

        Note:
            A section that raises is still recorded, so a failed
            decomposition can be profiled.
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            # Accumulate if section called multiple times
            self._sections[name] = self._sections.get(name, 0.0) + elapsed

    def result(self) -> dict[str, float]:
        """
        Get timing results.

        Returns:
            Dictionary with 'total_seconds' and all section timings

        Raises:
            RuntimeError: If called before stop()
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")

        result = {'total_seconds': self._total}
        result.update(self._sections)
        return result

