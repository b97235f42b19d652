from resume_worker.customization.client import CustomizationClient
from resume_worker.extraction.extractor import DocumentExtractor
from resume_worker.logging.logger import Log
from resume_worker.pipeline.pipeline import AttemptContext, PipelineStep
from resume_worker.rendering.base import BaseRenderer
from resume_worker.storage.base import BaseArtifactStore
from resume_worker.storage.exceptions import ArtifactNotFoundError, OriginalArtifactMissingError
from resume_worker.storage.keys import customized_artifact_key

PDF_MIME_TYPE = "application/pdf"


class FetchOriginalStep(PipelineStep):
    checkpoint = 20

    def __init__(self, artifact_store: BaseArtifactStore) -> None:
        self._artifact_store = artifact_store

    def run(self, context: AttemptContext) -> AttemptContext:
        if context.record.markdown_content:
            Log.info(f"Resume {context.resume_id}: extracted text cached, skipping download")
            return context
        key = context.record.original_artifact_ref
        try:
            context.original_bytes = self._artifact_store.get(key)
        except ArtifactNotFoundError as exc:
            Log.error(f"Original file {key} of resume {context.resume_id} is missing")
            raise OriginalArtifactMissingError("Original resume file is missing") from exc
        Log.info(
            f"Loaded {len(context.original_bytes)} bytes for resume {context.resume_id}"
        )
        return context


class ExtractTextStep(PipelineStep):
    checkpoint = 30

    def __init__(self, extractor: DocumentExtractor) -> None:
        self._extractor = extractor

    def run(self, context: AttemptContext) -> AttemptContext:
        cached = context.record.markdown_content
        if cached:
            context.markdown = cached
            return context
        context.markdown = self._extractor.extract(
            context.original_bytes, context.record.mime_type
        )
        context.record_updates["markdown_content"] = context.markdown
        Log.info(f"Extracted {len(context.markdown)} chars from resume {context.resume_id}")
        return context


class CustomizeStep(PipelineStep):
    checkpoint = 70

    def __init__(self, client: CustomizationClient, timeout_seconds: float) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds

    def run(self, context: AttemptContext) -> AttemptContext:
        context.customized_markdown = self._client.customize(
            context.markdown,
            context.record.job_context,
            self._timeout_seconds,
            cancel_event=context.cancel_event,
        )
        context.record_updates["customized_content"] = context.customized_markdown
        Log.info(f"Customized resume {context.resume_id}")
        return context


class RenderStep(PipelineStep):
    checkpoint = 90

    def __init__(self, renderer: BaseRenderer) -> None:
        self._renderer = renderer

    def run(self, context: AttemptContext) -> AttemptContext:
        context.rendered_pdf = self._renderer.render(
            context.customized_markdown, cancel_event=context.cancel_event
        )
        return context


class UploadArtifactStep(PipelineStep):
    def __init__(self, artifact_store: BaseArtifactStore) -> None:
        self._artifact_store = artifact_store

    def run(self, context: AttemptContext) -> AttemptContext:
        if not context.rendered_pdf:
            raise ValueError("AttemptContext.rendered_pdf must be set before upload")
        key = customized_artifact_key(context.record.user_id, context.resume_id)
        context.customized_url = self._artifact_store.upload(
            context.rendered_pdf, key, PDF_MIME_TYPE
        )
        context.customized_ref = key
        Log.info(f"Uploaded customized resume {context.resume_id} to {key}")
        return context
