from .auth import FileTokenSource, StaticTokenSource, Token, TokenCache, TokenSource
from .session_client import SessionClient

__all__ = [
    "FileTokenSource",
    "SessionClient",
    "StaticTokenSource",
    "Token",
    "TokenCache",
    "TokenSource",
]
