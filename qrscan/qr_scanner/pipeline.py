# qrscan/qr_scanner/pipeline.py

"""
Multi-strategy decode pipeline.

Each strategy filters a fresh copy of the source bitmap and hands it to the
pattern decoder. Strategies run strictly in list order and the first decode
wins. A strategy that raises is recorded as a failed attempt and the loop
moves on; running out of strategies is a normal "not found" outcome.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..utils.log import log_event
from . import filters
from .bitmap import Bitmap, DecodeResult
from .decoder import PatternDecoder

ProgressCallback = Callable[[int, str], None]


@dataclass(frozen=True)
class Strategy:
    key: str
    name: str
    progress: int
    fn: Callable[[Bitmap], Bitmap]


STRATEGIES: List[Strategy] = [
    Strategy("identity", "Direct Detection", 65, filters.identity),
    Strategy("contrast", "Enhanced Contrast", 70, filters.enhance_contrast),
    Strategy("grayscale", "Adaptive Histogram", 75, filters.grayscale),
    Strategy("threshold", "Binary Threshold", 80, filters.binary_threshold),
    Strategy("sharpen", "Sharpening", 85, filters.sharpen),
    Strategy("invert", "Color Inversion", 90, filters.invert),
    Strategy("erode", "Morphological", 95, filters.erode),
]


@dataclass(frozen=True)
class StrategyAttempt:
    strategy: str
    result: Optional[DecodeResult] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy,
            "decoded": self.succeeded,
            "error": self.error,
        }


@dataclass
class ScanOutcome:
    result: Optional[DecodeResult] = None
    strategy: Optional[str] = None
    attempts: List[StrategyAttempt] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.result is not None


def attempt_strategy(strategy: Strategy, source: Bitmap, decoder: PatternDecoder) -> StrategyAttempt:
    """Run one filter + decode pass; faults come back as a value, not an exception."""
    try:
        filtered = strategy.fn(source.copy())
        result = decoder.decode(filtered.data, filtered.width, filtered.height)
    except Exception as exc:
        return StrategyAttempt(strategy=strategy.name, error=f"{type(exc).__name__}: {exc}")
    return StrategyAttempt(strategy=strategy.name, result=result)


def run_strategies(
    source: Bitmap,
    decoder: PatternDecoder,
    on_progress: Optional[ProgressCallback] = None,
    pause: float = 0.0,
    strategies: Optional[List[Strategy]] = None,
) -> ScanOutcome:
    outcome = ScanOutcome()

    for strategy in strategies or STRATEGIES:
        if on_progress is not None:
            on_progress(strategy.progress, strategy.name)

        attempt = attempt_strategy(strategy, source, decoder)
        outcome.attempts.append(attempt)

        if attempt.error is not None:
            log_event(
                "strategy_failed",
                level=logging.WARNING,
                strategy=strategy.name,
                error=attempt.error,
            )
        else:
            log_event(
                "strategy_attempt",
                level=logging.DEBUG,
                strategy=strategy.name,
                decoded=attempt.succeeded,
            )

        if attempt.succeeded:
            outcome.result = attempt.result
            outcome.strategy = strategy.name
            return outcome

        if pause > 0:
            time.sleep(pause)

    return outcome
