"""Prefix-style command parsing ("!weather New York")."""

import re
from typing import Callable, Optional

from pyfi_bot.ports.inbound import ArgShape, Invocation

# Letters, digits, "-" and "_", starting with a letter or digit
COMMAND_NAME_RE = re.compile(r"[a-z0-9][a-z0-9_-]*\Z")


def parse_prefixed(
    content: str,
    prefix: str,
    caller: str,
    shape_for: Callable[[str], ArgShape],
) -> Optional[Invocation]:
    """Parse a chat line into an Invocation.

    Returns None for lines that don't start with the prefix, a bare prefix,
    a name that isn't a command name ("!!!", "! wow", "!?"), or when
    prefix-style commands are disabled (empty prefix).
    """
    if not prefix:
        return None
    text = (content or "").strip()
    if not text.startswith(prefix):
        return None
    body = text[len(prefix):]
    if not body or body[0].isspace():
        return None

    parts = body.split(None, 1)
    name = parts[0].lower()
    if not COMMAND_NAME_RE.match(name):
        return None
    rest = parts[1].strip() if len(parts) > 1 else ""

    if shape_for(name) is ArgShape.TOKENS:
        arguments = tuple(rest.split())
    else:
        arguments = (rest,) if rest else ()

    return Invocation(command_name=name, arguments=arguments, caller=caller, prefix=prefix)
