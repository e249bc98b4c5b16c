"""Local command registry — name → handler table filled once at startup."""

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from pyfi_bot.ports.inbound import ArgShape, Invocation
from pyfi_bot.ports.outbound import ReplyChannel

CommandHandler = Callable[[Invocation, ReplyChannel], Awaitable[None]]


class RegistryError(Exception):
    """Raised on duplicate names or registration after startup."""
    pass


@dataclass(frozen=True)
class CommandRegistration:
    name: str
    handler: CommandHandler
    description: str = ""
    usage: str = ""  # e.g. "<location>"
    arg_shape: ArgShape = ArgShape.TEXT


class CommandRegistry:
    """In-memory command table. Read-only once frozen."""

    def __init__(self):
        self._commands: Dict[str, CommandRegistration] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(
        self,
        name: str,
        handler: CommandHandler,
        description: str = "",
        usage: str = "",
        arg_shape: ArgShape = ArgShape.TEXT,
    ) -> CommandRegistration:
        if self._frozen:
            raise RegistryError(f"registry is frozen, cannot register {name!r}")
        key = name.strip().lower()
        if not key:
            raise RegistryError("command name must not be empty")
        if key in self._commands:
            raise RegistryError(f"command {key!r} is already registered")
        registration = CommandRegistration(
            name=key,
            handler=handler,
            description=description,
            usage=usage,
            arg_shape=arg_shape,
        )
        self._commands[key] = registration
        return registration

    def freeze(self) -> None:
        self._frozen = True

    def lookup(self, name: str) -> Optional[CommandRegistration]:
        return self._commands.get(name.strip().lower())

    def arg_shape(self, name: str) -> ArgShape:
        registration = self.lookup(name)
        return registration.arg_shape if registration else ArgShape.TEXT

    def registrations(self) -> List[CommandRegistration]:
        return sorted(self._commands.values(), key=lambda r: r.name)

    def names(self) -> List[str]:
        return [r.name for r in self.registrations()]

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def __len__(self) -> int:
        return len(self._commands)
