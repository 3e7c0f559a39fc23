"""Tests for the aws command line deletion backend."""

import json
from unittest.mock import patch

import pytest

from domain.exceptions import BackendNotAvailableError
from infrastructure.backends.command_backend import CommandDeletionBackend

RUN_CMD = 'infrastructure.backends.command_backend.run_cmd'


@pytest.fixture
def backend():
    return CommandDeletionBackend(endpoint='http://minio:9000')


def test_delete_object_runs_s3_rm(backend):
    with patch(RUN_CMD, return_value=(0, 'delete: s3://bA/urn:oid:p1\n', '')) as run:
        result = backend.delete_object('bA', 'urn:oid:p1')

    assert result.success is True
    cmd = run.call_args.args[0]
    assert cmd == ['aws', 's3', 'rm', 's3://bA/urn:oid:p1', '--endpoint-url', 'http://minio:9000']


def test_delete_object_failure(backend):
    with patch(RUN_CMD, return_value=(1, '', 'An error occurred (AccessDenied)\n')):
        result = backend.delete_object('bA', 'key')

    assert result.success is False
    assert 'AccessDenied' in result.error


def test_no_verify_ssl_flag():
    backend = CommandDeletionBackend(endpoint='https://s3', verify_ssl=False)
    with patch(RUN_CMD, return_value=(0, '', '')) as run:
        backend.delete_object('b', 'k')
    assert '--no-verify-ssl' in run.call_args.args[0]


def test_delete_objects_sends_json_payload(backend):
    with patch(RUN_CMD, return_value=(0, json.dumps({'Deleted': [{'Key': 'a'}, {'Key': 'b'}]}), '')) as run:
        result = backend.delete_objects('bA', ['a', 'b'])

    assert result.success is True
    assert result.deleted == 2
    cmd = run.call_args.args[0]
    assert cmd[:5] == ['aws', 's3api', 'delete-objects', '--bucket', 'bA']
    payload = json.loads(cmd[cmd.index('--delete') + 1])
    assert payload['Objects'] == [{'Key': 'a'}, {'Key': 'b'}]


def test_delete_objects_reported_errors(backend):
    output = json.dumps({'Errors': [{'Key': 'b', 'Code': 'AccessDenied', 'Message': 'denied'}]})
    with patch(RUN_CMD, return_value=(0, output, '')):
        result = backend.delete_objects('bA', ['a', 'b'])

    assert result.success is False


def test_ensure_available_raises_when_missing():
    backend = CommandDeletionBackend(endpoint='http://s3', executable='definitely-not-aws-cli')
    with pytest.raises(BackendNotAvailableError):
        backend.ensure_available()
