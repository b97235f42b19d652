from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from resume_worker.config.settings import Settings
from resume_worker.logging.logger import Log
from resume_worker.storage.base import BaseArtifactStore
from resume_worker.storage.exceptions import (
    ArtifactNotFoundError,
    StorageError,
    StorageUnavailableError,
)

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class S3ArtifactStore(BaseArtifactStore):
    """Artifact store on S3 or an S3-compatible service such as MinIO."""

    def __init__(
        self,
        *,
        bucket: str,
        region: str,
        endpoint_url: str | None = None,
        client: Any | None = None,
    ) -> None:
        self._bucket = bucket
        self._region = region
        self._endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self._client = client if client is not None else boto3.client(
            "s3", region_name=region, endpoint_url=self._endpoint_url
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ArtifactStore":
        """Build the store and its boto3 client from AWS_* settings."""
        endpoint_url = settings.aws_endpoint_url or None
        client = boto3.client(
            "s3",
            region_name=settings.aws_region,
            endpoint_url=endpoint_url,
            aws_access_key_id=settings.aws_access_key_id or None,
            aws_secret_access_key=settings.aws_secret_access_key or None,
        )
        if endpoint_url:
            Log.info(f"Using custom S3 endpoint: {endpoint_url}")
        return cls(
            bucket=settings.aws_bucket_name,
            region=settings.aws_region,
            endpoint_url=endpoint_url,
            client=client,
        )

    def check_connection(self) -> None:
        """Verify the bucket is reachable.

        Raises:
            StorageUnavailableError: if the bucket cannot be reached.
        """
        try:
            self._client.head_bucket(Bucket=self._bucket)
        except (BotoCoreError, ClientError) as exc:
            raise StorageUnavailableError(
                f"Bucket '{self._bucket}' is not reachable: {exc}"
            ) from exc
        Log.info(f"Artifact store connected to bucket '{self._bucket}'")

    def upload(self, data: bytes, key: str, mime_type: str) -> str:
        try:
            self._client.put_object(
                Bucket=self._bucket, Key=key, Body=data, ContentType=mime_type
            )
        except (BotoCoreError, ClientError) as exc:
            Log.warning(f"Upload of {key} failed: {exc}")
            raise StorageError("Failed to upload file to storage") from exc
        return self._object_url(key)

    def get(self, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            return response["Body"].read()
        except ClientError as exc:
            if _error_code(exc) in _MISSING_KEY_CODES:
                raise ArtifactNotFoundError(f"Artifact '{key}' not found") from exc
            Log.warning(f"Download of {key} failed: {exc}")
            raise StorageError("Failed to retrieve file from storage") from exc
        except BotoCoreError as exc:
            Log.warning(f"Download of {key} failed: {exc}")
            raise StorageError("Failed to retrieve file from storage") from exc

    def delete(self, key: str) -> bool:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            Log.warning(f"Delete of {key} failed: {exc}")
            raise StorageError("Failed to delete file from storage") from exc
        return True

    def presigned_upload_url(self, key: str, mime_type: str, expiry_seconds: int) -> str:
        try:
            return self._client.generate_presigned_url(
                "put_object",
                Params={"Bucket": self._bucket, "Key": key, "ContentType": mime_type},
                ExpiresIn=expiry_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            Log.warning(f"Presigning upload of {key} failed: {exc}")
            raise StorageError("Failed to generate upload URL") from exc

    def presigned_download_url(self, key: str, expiry_seconds: int) -> str:
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=expiry_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            Log.warning(f"Presigning download of {key} failed: {exc}")
            raise StorageError("Failed to generate download URL") from exc

    def _object_url(self, key: str) -> str:
        if self._endpoint_url:
            return f"{self._endpoint_url}/{self._bucket}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))
