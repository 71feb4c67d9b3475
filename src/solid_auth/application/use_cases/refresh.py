from __future__ import annotations

from dataclasses import dataclass

from ...domain.constants import StorageField
from ...domain.entities import DpopTokenResult, RefreshTokenInput
from ...domain.exceptions import MissingSessionStateError
from ...domain.ports import SessionStorage
from .request_tokens import TokenRequesterUseCase


@dataclass(slots=True)
class TokenRefresherUseCase:
    """
    Application use case: trade the session's stored refresh token for a new
    token set, persisted by the requester.
    """

    storage: SessionStorage
    requester: TokenRequesterUseCase

    async def execute(self, session_id: str) -> DpopTokenResult:
        """
        Raises:
            MissingSessionStateError if no refresh token (or issuer) is stored
            and everything TokenRequesterUseCase raises.
        """
        refresh_token = await self.storage.get_for_user(
            session_id,
            StorageField.REFRESH_TOKEN.value,
            secure=True,
            error_if_null=True,
        )
        if refresh_token is None:
            raise MissingSessionStateError(f"No refresh token stored for session [{session_id}]")
        return await self.requester.execute(session_id, RefreshTokenInput(refresh_token=refresh_token))
