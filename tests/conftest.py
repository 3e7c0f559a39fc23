import os
import sys
import threading
from typing import List, Tuple

import pytest

# Ensure src/ is on sys.path so the layer packages are importable
SRC = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from domain.models import DeletionResult  # noqa: E402


class RecordingBackend:
    """In-memory deletion backend that records every call."""

    def __init__(self, fail_keys=(), fail_batches=False, raise_keys=()):
        self.fail_keys = set(fail_keys)
        self.fail_batches = fail_batches
        self.raise_keys = set(raise_keys)
        self.single_calls: List[Tuple[str, str]] = []
        self.batch_calls: List[Tuple[str, List[str]]] = []
        self._lock = threading.Lock()

    def delete_object(self, bucket, key):
        with self._lock:
            self.single_calls.append((bucket, key))
        if key in self.raise_keys:
            raise RuntimeError(f"connection reset deleting {key}")
        if key in self.fail_keys:
            return DeletionResult.failed("AccessDenied: Access Denied")
        return DeletionResult.ok()

    def delete_objects(self, bucket, keys):
        with self._lock:
            self.batch_calls.append((bucket, list(keys)))
        if self.fail_batches:
            return DeletionResult.failed("InternalError: We encountered an internal error")
        return DeletionResult.ok(deleted=len(keys))


class RecordingDispatcher:
    """Dispatcher stand-in that keeps sent items in order."""

    def __init__(self):
        self.items = []

    def send_job(self, job):
        self.items.append(('job', job))

    def send_batch(self, batch):
        self.items.append(('batch', batch))

    @property
    def jobs(self):
        return [item for kind, item in self.items if kind == 'job']

    @property
    def batches(self):
        return [item for kind, item in self.items if kind == 'batch']


class ListSink:
    """Failure sink stand-in collecting jobs in memory."""

    def __init__(self):
        self.jobs = []
        self.closed = 0
        self._lock = threading.Lock()

    def append(self, job):
        with self._lock:
            self.jobs.append(job)

    def close(self):
        self.closed += 1


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep configuration tests independent of the caller's environment."""
    for name in list(os.environ):
        if name.startswith('BULK_DELETE_'):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv('AWS_REGION', raising=False)
    monkeypatch.delenv('AWS_DEFAULT_REGION', raising=False)


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def sink():
    return ListSink()


@pytest.fixture
def sample_lines():
    return ["bA,id1,p1,n1", "bA,id2,p2,n2", "bA,id3,p3,n3"]


@pytest.fixture
def make_backend():
    """Build a RecordingBackend with custom failures."""
    return RecordingBackend


@pytest.fixture
def write_input(tmp_path):
    """Write lines to an input file and return its path."""
    def _write(lines, name="objects.csv"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write
