"""Object storage backends.

Two backends share the ``ObjectStore`` interface:

    S3ObjectStore     objects in an S3 bucket (production)
    LocalObjectStore  files under a base directory, one sub-directory per
                      bucket (local runs and tests):

        data/
          my-bucket/
            stock/stock-data.csv
            stock/2026/10.json
"""

import logging
from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError


logger = logging.getLogger(__name__)


class ObjectNotFoundError(Exception):
    """Requested object does not exist."""

    def __init__(self, bucket: str, key: str):
        super().__init__(f"Object not found: {bucket}/{key}")
        self.bucket = bucket
        self.key = key


class ObjectStoreError(Exception):
    """Storage backend failed."""


class ObjectStore(Protocol):
    """Minimal object storage interface."""

    def get(self, bucket: str, key: str) -> bytes:
        ...

    def put(self, bucket: str, key: str, data: bytes) -> None:
        ...


def _safe_key(key: str) -> Path:
    """Convert an object key to a relative path that stays inside its bucket."""
    parts = [p for p in key.replace("\\", "/").split("/") if p not in ("", ".", "..")]
    if not parts:
        raise ObjectStoreError(f"Invalid object key: {key!r}")
    return Path(*parts)


class LocalObjectStore:
    """Filesystem-backed object store."""

    def __init__(self, base_dir: Path | str = "data"):
        self.base_dir = Path(base_dir)

    def _path(self, bucket: str, key: str) -> Path:
        return self.base_dir / (bucket or "default") / _safe_key(key)

    def get(self, bucket: str, key: str) -> bytes:
        path = self._path(bucket, key)
        if not path.is_file():
            raise ObjectNotFoundError(bucket, key)
        with open(path, "rb") as f:
            return f.read()

    def put(self, bucket: str, key: str, data: bytes) -> None:
        path = self._path(bucket, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise ObjectStoreError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Object written: {path}")


class S3ObjectStore:
    """S3-backed object store."""

    def __init__(self, region: str = "ap-northeast-1", client: Any = None):
        self.region = region
        self._client = client

    def _get_client(self) -> Any:
        """Get or create the S3 client."""
        if self._client is None:
            self._client = boto3.client("s3", region_name=self.region)
        return self._client

    def get(self, bucket: str, key: str) -> bytes:
        try:
            obj = self._get_client().get_object(Bucket=bucket, Key=key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("NoSuchKey", "NoSuchBucket", "404"):
                raise ObjectNotFoundError(bucket, key) from e
            raise ObjectStoreError(f"S3 get {bucket}/{key} failed: {e}") from e
        except BotoCoreError as e:
            raise ObjectStoreError(f"S3 get {bucket}/{key} failed: {e}") from e

        body = obj["Body"]
        try:
            return body.read()
        finally:
            body.close()

    def put(self, bucket: str, key: str, data: bytes) -> None:
        try:
            self._get_client().put_object(Bucket=bucket, Key=key, Body=data)
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(f"S3 put {bucket}/{key} failed: {e}") from e
        logger.debug(f"Object written: s3://{bucket}/{key}")
