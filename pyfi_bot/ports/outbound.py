"""Outbound ports — interfaces for the reply channel and remote backend."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pyfi_bot.domain.models import FormattedReply

# Backend answers HTTP 200 with this prefix when no command matched
UNKNOWN_COMMAND_SENTINEL = "Unknown command:"


class RemoteStatus(Enum):
    SUCCESS = "success"
    ERROR = "error"


class RemoteErrorKind(Enum):
    NOT_CONFIGURED = "not_configured"  # endpoint or key absent, no call made
    NOT_FOUND = "not_found"  # sentinel "Unknown command:" result
    TRANSPORT = "transport"  # network error, timeout, non-200, malformed body
    BACKEND = "backend"  # envelope carried errorType


@dataclass(frozen=True)
class RemoteResult:
    """Outcome of one remote command call."""

    status: RemoteStatus
    error_kind: Optional[RemoteErrorKind] = None
    result_text: Optional[str] = None
    detail: Optional[str] = None  # log-only, never shown to users

    @classmethod
    def success(cls, text: str) -> "RemoteResult":
        return cls(status=RemoteStatus.SUCCESS, result_text=text)

    @classmethod
    def error(
        cls,
        kind: RemoteErrorKind,
        detail: Optional[str] = None,
        text: Optional[str] = None,
    ) -> "RemoteResult":
        return cls(status=RemoteStatus.ERROR, error_kind=kind, result_text=text, detail=detail)

    @property
    def is_definitive(self) -> bool:
        """True when the backend handled the command."""
        if self.status is not RemoteStatus.SUCCESS:
            return False
        return not (self.result_text or "").startswith(UNKNOWN_COMMAND_SENTINEL)


@runtime_checkable
class RemoteResolverPort(Protocol):
    """Interface for the remote command-execution backend."""

    async def resolve(self, command: str, args: str, user: str) -> RemoteResult: ...


class ReplyState(Enum):
    PENDING = "pending"  # nothing sent yet
    DEFERRED = "deferred"  # placeholder acknowledged, awaiting edit
    SENT = "sent"  # final content delivered


@runtime_checkable
class ReplyChannel(Protocol):
    """Interface for answering one invocation."""

    @property
    def state(self) -> ReplyState: ...

    @property
    def supports_ephemeral(self) -> bool: ...

    async def send(self, reply: FormattedReply, ephemeral: bool = False) -> None: ...
    async def defer(self) -> None: ...
    async def edit(self, reply: FormattedReply) -> None: ...


async def respond(channel: ReplyChannel, reply: FormattedReply, ephemeral: bool = False) -> None:
    """Send the initial reply, or edit it once one (or a placeholder) exists."""
    if channel.state is ReplyState.PENDING:
        await channel.send(reply, ephemeral=ephemeral and channel.supports_ephemeral)
    else:
        await channel.edit(reply)
