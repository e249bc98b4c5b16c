"""Domain data models — pure Python dataclasses."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class PlainText:
    """Plain message reply."""

    content: str


@dataclass(frozen=True)
class EmbedField:
    name: str
    value: str
    inline: bool = True


@dataclass(frozen=True)
class StructuredEmbed:
    """Rich reply rendered as an embed by the chat adapter."""

    title: str
    color: int
    fields: Tuple[EmbedField, ...]
    timestamp: datetime
    footer: Optional[str] = None


FormattedReply = Union[PlainText, StructuredEmbed]


@dataclass(frozen=True)
class WeatherReport:
    """Measurements extracted from the backend's weather text."""

    location: str
    temperature: str  # °C
    feels_like: str  # °C
    wind_speed: str  # m/s
    humidity: str  # %
    pressure: str  # hPa
    cloudiness: str  # %
