# SPDX-License-Identifier: Apache-2.0
"""
Client — Result status code meanings.
"""

import httpx
import pytest

from freno_client.client.result import CODE_MEANINGS, Meaning, Result


@pytest.mark.parametrize(
    "code, meaning",
    [
        (200, Meaning.OK),
        (404, Meaning.NOT_FOUND),
        (417, Meaning.EXPECTATION_FAILED),
        (429, Meaning.TOO_MANY_REQUESTS),
        (500, Meaning.INTERNAL_SERVER_ERROR),
        (408, Meaning.REQUEST_TIMEOUT),
        (999, Meaning.UNKNOWN),
    ],
)
def test_meaning_is_derived_from_code(code, meaning):
    assert Result(code).meaning is meaning


def test_ok_and_failed():
    assert Result(200).ok is True
    assert Result(200).failed is False
    assert Result(500).ok is False
    assert Result(500).failed is True
    assert Result(999).unknown is True
    assert Result(200).unknown is False


def test_from_meaning_uses_inverse_mapping():
    assert Result.from_meaning("request_timeout").code == 408
    assert Result.from_meaning(Meaning.TOO_MANY_REQUESTS).code == 429
    assert Result.from_meaning("not_a_meaning").code == 0
    assert Result.from_meaning("not_a_meaning").meaning is Meaning.UNKNOWN


def test_request_timeout_is_never_a_freno_status():
    assert 408 in CODE_MEANINGS
    assert Result(408) == "request_timeout"


def test_body_is_parsed_lazily_and_cached():
    result = Result(200, b'{"Value": 0.5}')

    assert result.body == {"Value": 0.5}
    assert result.body is result.body


def test_body_is_none_without_payload():
    assert Result(200).body is None
    assert Result(200, b"").body is None


def test_from_response():
    response = httpx.Response(429, content=b'{"Message":"throttled"}')

    result = Result.from_response(response)

    assert result == 429
    assert result == "too_many_requests"
    assert result.body["Message"] == "throttled"


def test_equality():
    assert Result(200) == Result(200)
    assert Result(200) != Result(500)
    assert Result(200) != "internal_server_error"
    assert Result(200) != 500
    assert Result(200) != object()


def test_result_is_immutable():
    result = Result(200)
    with pytest.raises(AttributeError):
        result.code = 500
