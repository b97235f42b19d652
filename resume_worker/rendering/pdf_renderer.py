"""PDF rendering in a managed child process.

WeasyPrint runs outside the worker process. A hung or crashing render is
terminated without affecting the worker slot.
"""

import multiprocessing
import threading
import time
from collections.abc import Callable
from multiprocessing.connection import Connection
from multiprocessing.process import BaseProcess

from resume_worker.exceptions import AttemptCancelledError
from resume_worker.logging.logger import Log
from resume_worker.rendering.base import BaseRenderer
from resume_worker.rendering.exceptions import RenderError
from resume_worker.rendering.html_builder import HtmlBuilder

RenderFunction = Callable[[str], bytes]

_KILL_GRACE_SECONDS = 5.0


def write_pdf(html: str) -> bytes:
    """HTML to PDF with WeasyPrint. Runs inside the child process."""
    from weasyprint import HTML

    return HTML(string=html).write_pdf()


def _render_in_child(conn: Connection, render_fn: RenderFunction, html: str) -> None:
    try:
        pdf = render_fn(html)
        conn.send(("ok", pdf))
    except Exception as exc:
        conn.send(("error", f"{type(exc).__name__}: {exc}"))
    finally:
        conn.close()


class ProcessPdfRenderer(BaseRenderer):
    """Renders markdown to PDF, one child process per render.

    The child is terminated, killed if needed, and joined on every exit path:
    success, render error, timeout and cancellation.
    """

    def __init__(
        self,
        *,
        html_builder: HtmlBuilder,
        timeout_seconds: float,
        render_fn: RenderFunction = write_pdf,
        mp_context: str = "spawn",
        poll_interval_seconds: float = 0.1,
    ) -> None:
        self._html_builder = html_builder
        self._timeout_seconds = timeout_seconds
        self._render_fn = render_fn
        self._context = multiprocessing.get_context(mp_context)
        self._poll_interval_seconds = poll_interval_seconds

    def render(self, markdown: str, cancel_event: threading.Event | None = None) -> bytes:
        html = self._html_builder.build(markdown)
        parent_conn, child_conn = self._context.Pipe(duplex=False)
        process = self._context.Process(
            target=_render_in_child,
            args=(child_conn, self._render_fn, html),
            name="pdf-render",
            daemon=True,
        )
        try:
            process.start()
            child_conn.close()
            status, payload = self._wait_for_result(parent_conn, process, cancel_event)
        finally:
            child_conn.close()
            self._reap(process)
            parent_conn.close()

        if status != "ok":
            Log.error(f"PDF rendering failed in child process: {payload}")
            raise RenderError("PDF rendering failed")
        Log.info(f"Rendered PDF ({len(payload)} bytes)")
        return payload

    def _wait_for_result(
        self,
        conn: Connection,
        process: BaseProcess,
        cancel_event: threading.Event | None,
    ) -> tuple[str, bytes | str]:
        deadline = time.monotonic() + self._timeout_seconds
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise AttemptCancelledError("PDF rendering cancelled by shutdown")
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise RenderError(
                    f"PDF rendering timed out after {self._timeout_seconds:g}s"
                )
            if conn.poll(min(remaining, self._poll_interval_seconds)):
                try:
                    return conn.recv()
                except EOFError as exc:
                    process.join(timeout=1)
                    Log.error(f"Render process exited unexpectedly (exit code {process.exitcode})")
                    raise RenderError("PDF rendering failed") from exc

    @staticmethod
    def _reap(process: BaseProcess) -> None:
        if process.pid is None:
            return
        if process.is_alive():
            process.terminate()
            process.join(_KILL_GRACE_SECONDS)
        if process.is_alive():
            Log.warning(f"Render process {process.pid} ignored SIGTERM, killing it")
            process.kill()
        process.join()
        process.close()
