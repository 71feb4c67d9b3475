# tests/test_validate_response.py
import copy

import pytest

from solid_auth.application.use_cases.validate_response import ResponseValidator
from solid_auth.domain.exceptions import (
    MalformedResponseError,
    ProtocolError,
    TokenTypeMismatchError,
)
from solid_auth.domain.value_objects import ValidatedTokenResponse, ValidationFailure

from conftest import token_response


@pytest.fixture
def validator() -> ResponseValidator:
    return ResponseValidator()


@pytest.mark.parametrize("error", ["invalid_grant", "invalid_client", "x"])
def test_error_response_is_a_protocol_error(validator, error):
    with pytest.raises(ProtocolError, match=error):
        validator.execute({"error": error}, dpop_requested=False)


def test_error_message_includes_description_and_uri(validator):
    raw = {
        "error": "invalid_grant",
        "error_description": "code expired",
        "error_uri": "https://idp.com/errors/42",
    }
    with pytest.raises(ProtocolError) as excinfo:
        validator.execute(raw, dpop_requested=True)
    assert str(excinfo.value) == (
        "Token endpoint returned error [invalid_grant]: code expired (see https://idp.com/errors/42)"
    )


def test_error_wins_over_token_fields(validator):
    raw = token_response(error="server_error")
    with pytest.raises(ProtocolError):
        validator.execute(raw, dpop_requested=True)


@pytest.mark.parametrize("missing", ["access_token", "id_token", "token_type"])
def test_missing_required_field(validator, missing):
    raw = token_response()
    del raw[missing]
    with pytest.raises(MalformedResponseError, match=missing):
        validator.execute(raw, dpop_requested=True)


@pytest.mark.parametrize("field_name", ["access_token", "id_token", "token_type"])
def test_mistyped_required_field(validator, field_name):
    raw = token_response(**{field_name: 1234})
    with pytest.raises(MalformedResponseError, match=field_name):
        validator.execute(raw, dpop_requested=True)


def test_only_id_token_cites_access_token(validator):
    with pytest.raises(MalformedResponseError, match="access_token"):
        validator.execute({"id_token": "x"}, dpop_requested=True)


@pytest.mark.parametrize("expires_in", ["3600", True, [1]])
def test_non_numeric_expires_in(validator, expires_in):
    raw = token_response(expires_in=expires_in)
    with pytest.raises(MalformedResponseError, match="expires_in"):
        validator.execute(raw, dpop_requested=True)


def test_expires_in_is_optional(validator):
    raw = token_response(expires_in=None)
    assert "expires_in" not in raw
    result = validator.execute(raw, dpop_requested=True)
    assert result.expires_in is None


@pytest.mark.parametrize("token_type", ["Bearer", "bearer", "BEARER"])
def test_bearer_request_accepts_bearer_any_case(validator, token_type):
    result = validator.execute(token_response(token_type=token_type), dpop_requested=False)
    assert result.token_type == token_type


@pytest.mark.parametrize("token_type", ["DPoP", "mac", ""])
def test_bearer_request_rejects_other_token_types(validator, token_type):
    with pytest.raises(TokenTypeMismatchError, match="Bearer"):
        validator.execute(token_response(token_type=token_type), dpop_requested=False)


@pytest.mark.parametrize("token_type", ["DPoP", "Bearer", "anything"])
def test_dpop_request_is_lenient_by_default(validator, token_type):
    result = validator.execute(token_response(token_type=token_type), dpop_requested=True)
    assert result.token_type == token_type


def test_dpop_token_type_can_be_enforced():
    strict = ResponseValidator(enforce_dpop_token_type=True)
    assert strict.execute(token_response(token_type="dpop"), dpop_requested=True)
    with pytest.raises(TokenTypeMismatchError, match="DPoP"):
        strict.execute(token_response(token_type="Bearer"), dpop_requested=True)


def test_success_narrows_the_response(validator):
    raw = token_response(scope="openid webid")
    result = validator.execute(raw, dpop_requested=True)
    assert isinstance(result, ValidatedTokenResponse)
    assert result.access_token == "1234"
    assert result.id_token == "abcd"
    assert result.refresh_token == "!@#$"
    assert result.expires_in == 1800
    assert result.raw is raw
    assert result.raw["scope"] == "openid webid"


def test_non_string_refresh_token_is_ignored(validator):
    result = validator.execute(token_response(refresh_token=42), dpop_requested=True)
    assert result.refresh_token is None


def test_check_returns_a_tagged_failure(validator):
    outcome = validator.check({"id_token": "x"}, dpop_requested=False)
    assert isinstance(outcome, ValidationFailure)
    assert outcome.kind is MalformedResponseError
    assert isinstance(outcome.to_exception(), MalformedResponseError)


@pytest.mark.parametrize(
    "raw",
    [
        token_response(),
        {"error": "invalid_request"},
        {"id_token": "x"},
        token_response(token_type="DPoP"),
    ],
)
def test_check_is_pure_and_repeatable(validator, raw):
    before = copy.deepcopy(raw)
    first = validator.check(raw, dpop_requested=False)
    second = validator.check(raw, dpop_requested=False)
    assert first == second
    assert raw == before
