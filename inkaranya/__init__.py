from .api import ApiClient, ApiError, FileTokenStore, TokenStore
from .notify import Notifier
from .session import AuthSession

__all__ = ["ApiClient", "ApiError", "FileTokenStore", "TokenStore", "Notifier", "AuthSession", "__version__"]

__version__ = "0.1.0"
