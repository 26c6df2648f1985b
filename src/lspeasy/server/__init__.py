from lspeasy.server.handler import LanguageServerHandler
from lspeasy.server.session import LanguageServer, SessionState

__all__ = ["LanguageServer", "LanguageServerHandler", "SessionState"]
