import secrets
from pathlib import PurePosixPath


def original_artifact_key(user_id: str, filename: str) -> str:
    """Build a unique storage key for an upload: {user_id}/{random}{ext}"""
    extension = PurePosixPath(filename).suffix.lower()
    return f"{user_id}/{secrets.token_hex(16)}{extension}"


def customized_artifact_key(user_id: str, resume_id: str) -> str:
    """Build a storage key for a rendered resume. Every call returns a new key."""
    return f"{user_id}/{resume_id}/customized-{secrets.token_hex(8)}.pdf"
