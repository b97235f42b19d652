import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

from resume_worker.database.models import ResumeRecord


@dataclass(slots=True)
class AttemptContext:
    record: ResumeRecord
    attempt: int
    cancel_event: threading.Event = field(default_factory=threading.Event)
    original_bytes: bytes = b""
    markdown: str = ""
    customized_markdown: str = ""
    rendered_pdf: bytes = b""
    customized_ref: str = ""
    customized_url: str = ""
    record_updates: dict[str, object] = field(default_factory=dict)

    @property
    def resume_id(self) -> str:
        return self.record.id

    def drain_updates(self) -> dict[str, object]:
        """Return the pending record fields and clear them."""
        updates = self.record_updates
        self.record_updates = {}
        return updates


class PipelineStep(ABC):
    # Progress written to the record after the step, None to skip the write.
    checkpoint: ClassVar[int | None] = None

    @abstractmethod
    def run(self, context: AttemptContext) -> AttemptContext:
        raise NotImplementedError
