"""Deletion backend that shells out to the AWS command line tool."""

import json
import shutil
from typing import List, Optional

from domain.models import DeletionResult
from domain.exceptions import BackendNotAvailableError
from shared.logging import get_logger
from utils.shell import run_cmd

logger = get_logger(__name__)


class CommandDeletionBackend:
    """
    Deletes objects by running ``aws s3 rm`` / ``aws s3api delete-objects``.
    Implements IDeletionBackend protocol.
    """

    def __init__(
        self,
        endpoint: str,
        executable: str = "aws",
        timeout: Optional[float] = None,
        verify_ssl: bool = True
    ):
        self.endpoint = endpoint
        self.executable = executable
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._logger = get_logger(__name__)

    @classmethod
    def is_available(cls, executable: str = "aws") -> bool:
        """Check if the command line tool can be found on PATH."""
        return shutil.which(executable) is not None

    def ensure_available(self) -> None:
        if not self.is_available(self.executable):
            raise BackendNotAvailableError(f"'{self.executable}' not found on PATH")

    def _common_args(self) -> List[str]:
        args = ["--endpoint-url", self.endpoint]
        if not self.verify_ssl:
            args.append("--no-verify-ssl")
        return args

    def delete_object(self, bucket: str, key: str) -> DeletionResult:
        """Delete one object with ``aws s3 rm``."""
        cmd = [self.executable, "s3", "rm", f"s3://{bucket}/{key}"] + self._common_args()
        rc, out, err = run_cmd(cmd, timeout=self.timeout)

        if rc != 0:
            message = err.strip() or f"exit code {rc}"
            return DeletionResult.failed(message)

        self._logger.debug(f"Success: {out.strip()}")
        return DeletionResult.ok()

    def delete_objects(self, bucket: str, keys: List[str]) -> DeletionResult:
        """Delete several objects with ``aws s3api delete-objects``."""
        if not keys:
            return DeletionResult.ok(deleted=0)

        payload = json.dumps({
            "Objects": [{"Key": key} for key in keys],
            "Quiet": False
        })
        cmd = [
            self.executable, "s3api", "delete-objects",
            "--bucket", bucket,
            "--delete", payload,
            "--output", "json",
        ] + self._common_args()
        rc, out, err = run_cmd(cmd, timeout=self.timeout)

        if rc != 0:
            message = err.strip() or f"exit code {rc}"
            return DeletionResult.failed(message)

        try:
            response = json.loads(out) if out.strip() else {}
        except json.JSONDecodeError:
            response = {}

        errors = response.get("Errors", [])
        if errors:
            for error in errors:
                self._logger.debug(
                    f"error {error.get('Code')} with key {error.get('Key')}: {error.get('Message')}"
                )
            return DeletionResult.failed(f"{len(errors)} of {len(keys)} keys reported errors")

        return DeletionResult.ok(deleted=len(keys))
