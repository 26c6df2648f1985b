"""LSP Window Types - Types for window/logMessage."""

from enum import IntEnum

from lspeasy.types.base import LSPModel


class MessageType(IntEnum):
    Error = 1
    Warning = 2
    Info = 3
    Log = 4
    Debug = 5


class LogMessageParams(LSPModel):
    """Parameters of a window/logMessage notification."""

    type: MessageType
    message: str
