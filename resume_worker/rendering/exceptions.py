from resume_worker.exceptions import ResourceError


class RenderError(ResourceError):
    """Raised when the rendering engine fails, crashes or times out."""
