"""Deletion backend using the S3 API through boto3."""

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError, BotoCoreError
from typing import List, Optional

from domain.models import DeletionResult
from shared.logging import get_logger

logger = get_logger(__name__)


class S3DeletionBackend:
    """
    Deletes objects with DeleteObject / DeleteObjects requests.
    Implements IDeletionBackend protocol.

    One client is shared by all worker threads; boto3 low-level clients are
    thread-safe.
    """

    def __init__(
        self,
        endpoint: str,
        region: str = "us-east-1",
        verify_ssl: bool = True,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        max_pool_connections: int = 10
    ):
        """
        Initialize S3 deletion backend.

        Args:
            endpoint: S3 endpoint URL
            region: Region name used for request signing
            verify_ssl: Verify TLS certificates of the endpoint
            access_key: Optional access key (boto3 credential chain otherwise)
            secret_key: Optional secret key
            max_pool_connections: HTTP connection pool size, at least the worker count
        """
        self.endpoint = endpoint
        self.region = region
        self.verify_ssl = verify_ssl
        self.access_key = access_key
        self.secret_key = secret_key
        self.max_pool_connections = max_pool_connections

        self._client = self._create_client()
        self._logger = get_logger(__name__)

    def _create_client(self):
        """Create S3 client with path-style addressing for S3-compatible stores."""
        config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'},
            max_pool_connections=self.max_pool_connections
        )

        kwargs = {
            'endpoint_url': self.endpoint,
            'region_name': self.region,
            'verify': self.verify_ssl,
            'config': config
        }

        if self.access_key and self.secret_key:
            kwargs['aws_access_key_id'] = self.access_key
            kwargs['aws_secret_access_key'] = self.secret_key

        return boto3.client('s3', **kwargs)

    def delete_object(self, bucket: str, key: str) -> DeletionResult:
        """Delete one object."""
        try:
            self._client.delete_object(Bucket=bucket, Key=key)
        except ClientError as e:
            error = e.response.get('Error', {})
            message = f"{error.get('Code', 'Unknown')}: {error.get('Message', str(e))}"
            return DeletionResult.failed(message)
        except BotoCoreError as e:
            return DeletionResult.failed(str(e))

        self._logger.debug(f"Object removed: s3://{bucket}/{key}")
        return DeletionResult.ok()

    def delete_objects(self, bucket: str, keys: List[str]) -> DeletionResult:
        """
        Delete several objects of one bucket in one request.

        The result is all-or-nothing: a response that reports any per-key
        error is a failure of the whole request.
        """
        if not keys:
            return DeletionResult.ok(deleted=0)

        try:
            response = self._client.delete_objects(
                Bucket=bucket,
                Delete={
                    'Objects': [{'Key': key} for key in keys],
                    'Quiet': False
                }
            )
        except ClientError as e:
            error = e.response.get('Error', {})
            message = f"{error.get('Code', 'Unknown')}: {error.get('Message', str(e))}"
            return DeletionResult.failed(message)
        except BotoCoreError as e:
            return DeletionResult.failed(str(e))

        errors = response.get('Errors', [])
        if errors:
            for error in errors:
                self._logger.debug(
                    f"error {error.get('Code')} with key {error.get('Key')}: {error.get('Message')}"
                )
            return DeletionResult.failed(f"{len(errors)} of {len(keys)} keys reported errors")

        deleted = len(response.get('Deleted', [])) or len(keys)
        self._logger.debug(f"Removed {deleted} objects from {bucket}")
        return DeletionResult.ok(deleted=deleted)
