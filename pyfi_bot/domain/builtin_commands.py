"""Built-in local commands: ping, help and the weather fallback."""

from pyfi_bot.domain.models import PlainText
from pyfi_bot.domain.registry import CommandHandler, CommandRegistry
from pyfi_bot.ports.inbound import ArgShape, Invocation
from pyfi_bot.ports.outbound import ReplyChannel, respond


async def ping(invocation: Invocation, channel: ReplyChannel) -> None:
    await respond(channel, PlainText("Pong!"))


async def weather_fallback(invocation: Invocation, channel: ReplyChannel) -> None:
    """Answers /weather when the remote backend is unset or failed."""
    location = invocation.argument_string
    if location:
        text = f'Weather backend is unavailable right now for "{location}".'
    else:
        text = "Weather backend is unavailable right now."
    await respond(channel, PlainText(text))


def build_help_text(registry: CommandRegistry, prefix: str = "/") -> str:
    lines = ["**Available Commands:**"]
    for reg in registry.registrations():
        usage = f" {reg.usage}" if reg.usage else ""
        lines.append(f"{prefix}{reg.name}{usage} - {reg.description}")
    return "\n".join(lines)


def make_help_handler(registry: CommandRegistry) -> CommandHandler:
    async def show_help(invocation: Invocation, channel: ReplyChannel) -> None:
        await respond(channel, PlainText(build_help_text(registry, invocation.prefix)))

    return show_help


def register_builtin_commands(registry: CommandRegistry) -> CommandRegistry:
    registry.register(
        "weather",
        weather_fallback,
        description="Get weather for a location",
        usage="<location>",
        arg_shape=ArgShape.TEXT,
    )
    registry.register("help", make_help_handler(registry), description="Show this help message")
    registry.register("ping", ping, description="Check that the bot is responding")
    return registry
