"""Response shaping — turns backend result text into replies.

Pure Python, no framework dependencies.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from pyfi_bot.domain.models import (
    EmbedField,
    FormattedReply,
    PlainText,
    StructuredEmbed,
    WeatherReport,
)

logger = logging.getLogger(__name__)

# Discord rejects messages above this length
MAX_MESSAGE_LENGTH = 2000

WEATHER_COLOR = 0x0099FF
WEATHER_FOOTER = "Weather information"
WEATHER_PARSE_FAILED = "Sorry, couldn't parse the weather data."

# "<location>: Temperature: 18.5°C, feels like: 17.2°C, wind: 3.4 m/s,
#  humidity: 60%, pressure: 1012hPa, cloudiness: 40%"
WEATHER_RE = re.compile(
    r"(.+): Temperature: ([-\d.]+)°C, feels like: ([-\d.]+)°C, "
    r"wind: ([\d.]+) m/s, humidity: (\d+)%, pressure: (\d+)hPa, "
    r"cloudiness: (\d+)%"
)


def truncate_text(text: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def parse_weather(text: str) -> Optional[WeatherReport]:
    """Extract a WeatherReport, or None when the text does not match."""
    match = WEATHER_RE.search(text or "")
    if not match:
        return None
    location, temp, feels_like, wind, humidity, pressure, clouds = match.groups()
    return WeatherReport(
        location=location.strip(),
        temperature=temp,
        feels_like=feels_like,
        wind_speed=wind,
        humidity=humidity,
        pressure=pressure,
        cloudiness=clouds,
    )


def weather_embed(report: WeatherReport, timestamp: Optional[datetime] = None) -> StructuredEmbed:
    return StructuredEmbed(
        title=f"🌡️ Weather in {report.location}",
        color=WEATHER_COLOR,
        fields=(
            EmbedField(
                "Temperature",
                f"{report.temperature}°C / Feels like {report.feels_like}°C",
            ),
            EmbedField("Wind", f"{report.wind_speed} m/s"),
            EmbedField("Humidity", f"{report.humidity}%"),
            EmbedField("Conditions", f"{report.cloudiness}% cloudy / {report.pressure}hPa"),
        ),
        timestamp=timestamp or datetime.now(timezone.utc),
        footer=WEATHER_FOOTER,
    )


def _format_weather(result_text: str, timestamp: Optional[datetime]) -> FormattedReply:
    report = parse_weather(result_text)
    if report is None:
        logger.warning("weather result did not match expected format: %r", result_text[:200])
        return PlainText(WEATHER_PARSE_FAILED)
    return weather_embed(report, timestamp)


# Commands whose results are rendered as structured embeds
STRUCTURED_FORMATTERS: Dict[str, Callable[[str, Optional[datetime]], FormattedReply]] = {
    "weather": _format_weather,
}


def format_result(
    command: str,
    result_text: Optional[str],
    timestamp: Optional[datetime] = None,
) -> Optional[FormattedReply]:
    """Shape a backend result for the reply channel.

    Returns None when there is nothing to show (empty result); the caller
    decides what the user sees in that case.
    """
    text = result_text or ""
    structured = STRUCTURED_FORMATTERS.get(command)
    if structured is not None:
        return structured(text, timestamp)
    if not text.strip():
        logger.warning("[%s] backend returned an empty result", command)
        return None
    return PlainText(truncate_text(text))
