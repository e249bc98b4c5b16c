"""Port interfaces (Hexagonal Architecture)."""

from pyfi_bot.ports.inbound import ArgShape, Invocation
from pyfi_bot.ports.outbound import (
    UNKNOWN_COMMAND_SENTINEL,
    RemoteErrorKind,
    RemoteResolverPort,
    RemoteResult,
    RemoteStatus,
    ReplyChannel,
    ReplyState,
    respond,
)

__all__ = [
    "ArgShape",
    "Invocation",
    "UNKNOWN_COMMAND_SENTINEL",
    "RemoteErrorKind",
    "RemoteResolverPort",
    "RemoteResult",
    "RemoteStatus",
    "ReplyChannel",
    "ReplyState",
    "respond",
]
