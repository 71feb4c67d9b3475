from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

from ...domain.exceptions import (
    MalformedResponseError,
    ProtocolError,
    TokenTypeMismatchError,
)
from ...domain.value_objects import (
    ValidatedTokenResponse,
    ValidationFailure,
    ValidationResult,
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _dump(raw: Mapping[str, Any]) -> str:
    try:
        return json.dumps(dict(raw), default=str)
    except (TypeError, ValueError):
        return repr(raw)


def _missing(field_name: str, raw: Mapping[str, Any]) -> ValidationFailure:
    return ValidationFailure(
        MalformedResponseError,
        f"Invalid token endpoint response (missing the field '{field_name}'): {_dump(raw)}",
    )


@dataclass(slots=True)
class ResponseValidator:
    """
    Validates raw token endpoint responses.

    `check` is pure and returns a tagged result; `execute` raises on failure.

    `enforce_dpop_token_type` turns on the DPoP-side token_type check. It is
    off by default because some providers label DPoP-bound tokens as Bearer.
    """

    enforce_dpop_token_type: bool = False

    def check(self, raw: Mapping[str, Any], dpop_requested: bool) -> ValidationResult:
        error = raw.get("error")
        if isinstance(error, str):
            message = f"Token endpoint returned error [{error}]"
            description = raw.get("error_description")
            if isinstance(description, str):
                message += f": {description}"
            error_uri = raw.get("error_uri")
            if isinstance(error_uri, str):
                message += f" (see {error_uri})"
            return ValidationFailure(ProtocolError, message)

        access_token = raw.get("access_token")
        if not isinstance(access_token, str):
            return _missing("access_token", raw)

        id_token = raw.get("id_token")
        if not isinstance(id_token, str):
            return _missing("id_token", raw)

        token_type = raw.get("token_type")
        if not isinstance(token_type, str):
            return _missing("token_type", raw)

        expires_in = raw.get("expires_in")
        if expires_in is not None and not _is_number(expires_in):
            return ValidationFailure(
                MalformedResponseError,
                f"Invalid token endpoint response (invalid field 'expires_in'): {_dump(raw)}",
            )

        if not dpop_requested and token_type.lower() != "bearer":
            return ValidationFailure(
                TokenTypeMismatchError,
                "Invalid token endpoint response: requested a [Bearer] token, "
                f"but got a 'token_type' value of [{token_type}].",
            )
        if dpop_requested and self.enforce_dpop_token_type and token_type.lower() != "dpop":
            return ValidationFailure(
                TokenTypeMismatchError,
                "Invalid token endpoint response: requested a [DPoP] token, "
                f"but got a 'token_type' value of [{token_type}].",
            )

        refresh_token = raw.get("refresh_token")
        return ValidatedTokenResponse(
            access_token=access_token,
            id_token=id_token,
            token_type=token_type,
            raw=raw,
            expires_in=expires_in,
            refresh_token=refresh_token if isinstance(refresh_token, str) else None,
        )

    def execute(self, raw: Mapping[str, Any], dpop_requested: bool) -> ValidatedTokenResponse:
        """
        Raises:
            ProtocolError
            MalformedResponseError
            TokenTypeMismatchError
        """
        result = self.check(raw, dpop_requested)
        if isinstance(result, ValidationFailure):
            raise result.to_exception()
        return result
