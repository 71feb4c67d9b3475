from .env import settings_from_env
from .settings import SolidAuthSettings

__all__ = ["SolidAuthSettings", "settings_from_env"]
