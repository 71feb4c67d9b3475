from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Type, Union
from urllib.parse import urlsplit

from .exceptions import AuthenticationError


# --- Identity value objects ----------------------------------------------


def is_absolute_uri(value: str) -> bool:
    """
    True if `value` has a scheme and something after it, e.g.
    `https://pod.example/profile/card#me` or `urn:uuid:...`.
    """
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    if not parts.scheme or any(c.isspace() for c in value):
        return False
    return bool(parts.netloc or parts.path)


@dataclass(frozen=True, slots=True)
class WebId:
    """
    A WebID: the URI that identifies a Solid user.
    """
    value: str

    def __post_init__(self) -> None:
        if not is_absolute_uri(self.value):
            raise ValueError(f"Invalid WebID: {self.value!r} is not an absolute URI")

    def __str__(self) -> str:
        return self.value


# --- Token endpoint validation results -----------------------------------


@dataclass(frozen=True, slots=True)
class ValidatedTokenResponse:
    """
    A token endpoint response that passed validation.

    `raw` is the original mapping, untouched.
    """
    access_token: str
    id_token: str
    token_type: str
    raw: Mapping[str, Any]
    expires_in: Optional[float] = None
    refresh_token: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    """
    Why a token endpoint response was rejected.

    - kind:   the exception class to raise
    - detail: the human-readable message
    """
    kind: Type[AuthenticationError]
    detail: str

    def to_exception(self) -> AuthenticationError:
        return self.kind(self.detail)


ValidationResult = Union[ValidatedTokenResponse, ValidationFailure]
