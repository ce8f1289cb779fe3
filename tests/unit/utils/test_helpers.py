"""Unit tests for helper functions in helpers.py."""

import json
from datetime import datetime, UTC
from typing import cast

import pytest
from pytest import MonkeyPatch
from freezegun import freeze_time

from linkdump.types import LambdaEvent
from linkdump.exceptions import MissingEnvironmentVariableError
from linkdump.utils.helpers import (
    base_url,
    get_dump_url,
    utc_now,
    require_environment,
    guarantee_500_response,
)


@pytest.mark.parametrize(
    'domain, stage, expected',
    [
        ('abc123.execute-api.us-east-1.amazonaws.com', 'Dev', 'https://abc123.execute-api.us-east-1.amazonaws.com/Dev'),
        ('abc123.execute-api.us-east-1.amazonaws.com', 'Prod', 'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'),
        ('dump.example.com', 'Dev', 'https://dump.example.com'),
        ('example.com', 'Prod', 'https://example.com'),
        ('localhost:3000', 'local', 'http://localhost:3000'),
        ('127.0.0.1:3000', 'local', 'http://127.0.0.1:3000'),
    ],
)
def test_base_url(domain: str, stage: str, expected: str) -> None:
    event = {
        'requestContext': {
            'domainName': domain,
            'stage': stage,
        }
    }
    assert base_url(event) == expected


@pytest.mark.parametrize(
    'event',
    [
        {},
        {'requestContext': {}},
        {'requestContext': {'domainName': ''}},
        {'requestContext': {'stage': 'Dev'}},
    ],
)
def test_base_url_fallbacks_to_localhost(event: LambdaEvent) -> None:
    assert base_url(event) == 'http://localhost:3000'


@pytest.mark.parametrize(
    'slug, domain, stage, expected',
    [
        ('V1StGXR8_Z', 'dump.example.com', 'Prod', 'https://dump.example.com/V1StGXR8_Z'),
        ('abc-123_XY', 'abc.execute-api.eu-west-1.amazonaws.com', 'Prod', 'https://abc.execute-api.eu-west-1.amazonaws.com/Prod/abc-123_XY'),
    ],
)
def test_get_dump_url(slug: str, domain: str, stage: str, expected: str) -> None:
    event = cast(LambdaEvent, {'requestContext': {'domainName': domain, 'stage': stage}})
    assert get_dump_url(slug, event) == expected


@freeze_time('2025-10-15 12:00:00')
def test_utc_now() -> None:
    now = utc_now()
    assert now == datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)
    assert now.tzinfo is not None


def test_require_environment(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv('ENV1', 'value1')
    monkeypatch.setenv('ENV2', 'value2')

    @require_environment('ENV1', 'ENV2')
    def sample_function(x: int) -> int:
        return x + 1

    assert sample_function(1) == 2


@pytest.mark.parametrize(
    'env_setup, missing_names',
    [
        ({'ENV1': None, 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': '', 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': None, 'ENV2': None}, ["'ENV1'", "'ENV2'"]),
    ],
)
def test_require_environment_with_missing_or_empty_env_vars(
    monkeypatch: MonkeyPatch,
    env_setup: dict[str, str],
    missing_names: list[str],
) -> None:
    for name, value in env_setup.items():
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)

    @require_environment('ENV1', 'ENV2')
    def sample_function() -> None:
        pass

    expected_message = f'Missing required environment variables: {", ".join(missing_names)}'
    with pytest.raises(MissingEnvironmentVariableError, match=expected_message):
        sample_function()


def test_guarantee_500_response(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr('linkdump.utils.helpers.running_locally', lambda: False)

    @guarantee_500_response
    def faulty_lambda_handler(event, context):
        raise RuntimeError('boom')

    response = faulty_lambda_handler({}, None)
    body = json.loads(response['body'])

    assert response['statusCode'] == 500
    assert body['message'] == 'Internal Server Error'
    assert body['errorCode'] == 'UNKNOWN_INTERNAL_SERVER_ERROR'
    assert response['headers']['Access-Control-Allow-Origin'] == '*'


def test_guarantee_500_response_passes_through_responses(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr('linkdump.utils.helpers.running_locally', lambda: False)

    @guarantee_500_response
    def lambda_handler(event, context):
        return {'statusCode': 200, 'body': '{}'}

    assert lambda_handler({}, None) == {'statusCode': 200, 'body': '{}'}


def test_guarantee_500_response_reraises_when_running_locally(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr('linkdump.utils.helpers.running_locally', lambda: True)

    @guarantee_500_response
    def faulty_lambda_handler(event, context):
        raise RuntimeError('boom')

    with pytest.raises(RuntimeError, match='boom'):
        faulty_lambda_handler({}, None)
