"""Progress sink and cancellation primitives used while streaming a response."""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Protocol

from ..logger import get_logger
from ..messages import ResponsePart

logger = get_logger(__name__)


class Progress(Protocol):
    """
    Protocol for the sink that receives incremental response parts.
    """

    def report(self, part: ResponsePart) -> None:
        """Delivers one response part to the caller."""
        ...


class CancellationToken:
    """Cooperative cancellation flag checked by stream consumers."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class CollectingProgress:
    """Progress sink that keeps every reported part in order.

    Handy for callers that want the full response rather than a live stream.
    """

    def __init__(self, on_part: Optional[Callable[[ResponsePart], Any]] = None) -> None:
        self.parts: List[ResponsePart] = []
        self._on_part = on_part

    def report(self, part: ResponsePart) -> None:
        self.parts.append(part)
        if self._on_part is not None:
            self._on_part(part)


class SafeProgress:
    """Wraps a progress sink so that a failing ``report`` never aborts the stream.

    Exceptions raised by the wrapped sink are logged together with the model id
    and swallowed; subsequent parts are still delivered.
    """

    def __init__(self, inner: Progress, model_id: str = "") -> None:
        self._inner = inner
        self._model_id = model_id

    def report(self, part: ResponsePart) -> None:
        try:
            self._inner.report(part)
        except Exception as e:
            logger.error(
                "Progress.report failed for model '%s' (%s): %s",
                self._model_id,
                type(e).__name__,
                e,
            )
