from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from ...domain.constants import STORAGE_KEY_PREFIX, StorageField
from ...domain.entities import SessionRecord, load_dpop_key
from ...domain.exceptions import MissingSessionStateError
from ...domain.ports import SessionStorage

logger = logging.getLogger(__name__)


def user_key(session_id: str) -> str:
    return f"{STORAGE_KEY_PREFIX}:{session_id}"


class InMemorySessionStorage(SessionStorage):
    """
    Adapter implementing the SessionStorage port with two plain dicts.

    "Secure" values (tokens) and non-secure values (issuer, ...) live in
    separate stores, as they would in a browser or server-side session.
    Writes merge into the existing record.
    """

    def __init__(
        self,
        secure: Optional[Dict[str, Dict[str, str]]] = None,
        insecure: Optional[Dict[str, Dict[str, str]]] = None,
    ) -> None:
        self._secure: Dict[str, Dict[str, str]] = secure if secure is not None else {}
        self._insecure: Dict[str, Dict[str, str]] = insecure if insecure is not None else {}

    def _store(self, secure: bool) -> Dict[str, Dict[str, str]]:
        return self._secure if secure else self._insecure

    async def get_for_user(
        self,
        session_id: str,
        key: str,
        *,
        secure: bool = False,
        error_if_null: bool = False,
    ) -> Optional[str]:
        value = self._store(secure).get(user_key(session_id), {}).get(key)
        if value is None and error_if_null:
            raise MissingSessionStateError(
                f"Field [{key}] for user [{session_id}] is not stored"
            )
        return value

    async def set_for_user(
        self,
        session_id: str,
        values: Mapping[str, str],
        *,
        secure: bool = False,
    ) -> None:
        logger.debug("storing %s for session %s (secure=%s)", sorted(values), session_id, secure)
        record = self._store(secure).setdefault(user_key(session_id), {})
        record.update(values)

    async def delete_all_user_data(self, session_id: str) -> None:
        self._secure.pop(user_key(session_id), None)
        self._insecure.pop(user_key(session_id), None)


async def load_session_record(storage: SessionStorage, session_id: str) -> SessionRecord:
    """Build a SessionRecord view from both the secure and non-secure stores."""

    async def secure(field: StorageField) -> Optional[str]:
        return await storage.get_for_user(session_id, field.value, secure=True)

    return SessionRecord(
        session_id=session_id,
        issuer=await storage.get_for_user(session_id, StorageField.ISSUER.value),
        access_token=await secure(StorageField.ACCESS_TOKEN),
        id_token=await secure(StorageField.ID_TOKEN),
        refresh_token=await secure(StorageField.REFRESH_TOKEN),
        web_id=await secure(StorageField.WEB_ID),
        is_logged_in=(await secure(StorageField.IS_LOGGED_IN)) == "true",
        dpop_key=load_dpop_key(await secure(StorageField.DPOP_KEY)),
    )
