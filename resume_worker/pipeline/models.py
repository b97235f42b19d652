from dataclasses import dataclass
from enum import Enum


class AttemptDecision(str, Enum):
    """What the worker does with the delivery once an attempt ends."""

    ACK = "ack"
    NACK = "nack"


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one attempt, as seen by the job runner."""

    decision: AttemptDecision
    delay_seconds: float = 0.0
    reason: str = ""

    @classmethod
    def ack(cls, reason: str) -> "AttemptOutcome":
        return cls(decision=AttemptDecision.ACK, reason=reason)

    @classmethod
    def nack(cls, reason: str, delay_seconds: float = 0.0) -> "AttemptOutcome":
        return cls(decision=AttemptDecision.NACK, delay_seconds=delay_seconds, reason=reason)
