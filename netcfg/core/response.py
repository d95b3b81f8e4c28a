"""Receipts for device interactions and the per-send outcome wrapper.

A ``Response`` records one exchange with the device: what was sent, the raw
output, and whether the device flagged the exchange as failed.  Device-level
failure is independent of transport-level errors, which never produce a
``Response`` at all.

Usage::

    response = Response(host="leaf1", channel_input="show version")
    response.record(raw_output, failed_when_contains=["% Invalid input"])
    if response.failed:
        ...
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from .exceptions import CfgError, DeviceRejectedError, TransportError


class Outcome(StrEnum):
    """Classification of a single send in a pipeline."""

    OK = "ok"
    DEVICE_REJECTED = "device_rejected"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class Response:
    """Recorded result of one device interaction.

    Attributes:
        host: Device host the input was sent to.
        channel_input: The command or configuration text sent.
        result: Raw text returned by the device.
        failed: ``True`` if the device reported an error for this input.
        start_time: When the input was sent.
        finish_time: When the output was recorded.

    """

    host: str
    channel_input: str
    result: str = ""
    failed: bool = False
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    finish_time: datetime | None = None

    @property
    def elapsed_time(self) -> float:
        """Return seconds between send and record, ``0.0`` if not yet recorded."""
        if self.finish_time is None:
            return 0.0
        return (self.finish_time - self.start_time).total_seconds()

    def record(self, raw: str, failed_when_contains: Iterable[str] = ()) -> None:
        """Store device output and flag the response if it contains an error marker."""
        self.finish_time = datetime.now(UTC)
        self.result = raw
        self.failed = any(marker in raw for marker in failed_when_contains)

    def __repr__(self) -> str:
        status = "FAILED" if self.failed else "OK"
        return f"Response({status}, host={self.host}, input={self.channel_input[:30]!r})"


@dataclass
class LoadResult:
    """Ordered receipts produced by one load or abort invocation."""

    host: str
    responses: list[Response] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """Return ``True`` if any receipt was flagged as failed."""
        return any(r.failed for r in self.responses)

    @property
    def result(self) -> str:
        """Return every receipt's output joined by newlines."""
        return "\n".join(r.result for r in self.responses)


@dataclass
class CfgResult:
    """Text extracted from the device plus the receipts that produced it."""

    host: str
    result: str
    responses: list[Response] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """Return ``True`` if any receipt was flagged as failed."""
        return any(r.failed for r in self.responses)


@dataclass
class SendResult:
    """Outcome of one pipeline send.

    Attributes:
        step: Short label of the pipeline step (``rollback``, ``standard`` ...).
        response: The receipt, ``None`` when the transport failed.
        outcome: Classification of the send.
        error: The transport exception, if any.

    """

    step: str
    response: Response | None
    outcome: Outcome
    error: CfgError | None = None

    @classmethod
    def from_response(cls, step: str, response: Response) -> SendResult:
        """Classify a completed exchange by its failure flag."""
        outcome = Outcome.DEVICE_REJECTED if response.failed else Outcome.OK
        return cls(step=step, response=response, outcome=outcome)

    @classmethod
    def from_error(cls, step: str, error: CfgError) -> SendResult:
        """Record a send that never produced a receipt."""
        return cls(step=step, response=None, outcome=Outcome.TRANSPORT_ERROR, error=error)

    def raise_for_outcome(self, host: str, responses: list[Response]) -> None:
        """Raise the distinct error for a non-ok outcome.

        Args:
            host: Device host for error context.
            responses: Receipts collected so far; the rejected receipt must
                already be appended.

        Raises:
            TransportError: If the channel failed.
            DeviceRejectedError: If the device flagged the input as failed.

        """
        if self.outcome is Outcome.TRANSPORT_ERROR:
            raise TransportError(
                f"Transport failure during {self.step} step: {self.error}",
                device=host,
                details={"step": self.step},
                responses=responses,
            ) from self.error
        if self.outcome is Outcome.DEVICE_REJECTED:
            output = self.response.result.strip()[-200:] if self.response is not None else ""
            raise DeviceRejectedError(
                f"Device rejected {self.step} step",
                device=host,
                details={"step": self.step, "output": output},
                responses=responses,
            )
