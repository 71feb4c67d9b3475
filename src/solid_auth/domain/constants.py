from enum import Enum


class GrantType(str, Enum):
    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


class StorageField(str, Enum):
    ISSUER = "issuer"
    ACCESS_TOKEN = "access_token"
    ID_TOKEN = "id_token"
    REFRESH_TOKEN = "refresh_token"
    WEB_ID = "web_id"
    IS_LOGGED_IN = "is_logged_in"
    DPOP_KEY = "dpop_key"


STORAGE_KEY_PREFIX = "solidClientAuthenticationUser"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
DPOP_HEADER = "DPoP"
DPOP_SIGNING_ALG = "ES256"
