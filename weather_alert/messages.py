"""Chat texts for lifecycle events and weather updates (Telegram Markdown)."""

from weather_alert.domain import Observation, TwilightWindow

ALERT_TEMPLATE = """🚨 *Alert*

Wind Speed: *{wind:.1f} m/s*
Temperature: *{temperature:.1f}°C*
Update At: {observed_at}
"""

UPDATE_TEMPLATE = """ℹ️ *Update:*

Wind Speed: *{wind:.1f} m/s*
_Wind speed is now below the threshold._
Temperature: *{temperature:.1f}°C*
Update At: {observed_at}
"""

WORK_STARTED_TEMPLATE = """🌒 *Monitoring started*

Nautical dusk: {dusk} UTC
Nautical dawn: {dawn} UTC
"""

WORK_ENDED_TEXT = "🌅 *Monitoring ended* at nautical dawn."


def format_update(observation: Observation, hazardous: bool) -> str:
    """Caption for a chart update; the alert template when `hazardous`."""
    template = ALERT_TEMPLATE if hazardous else UPDATE_TEMPLATE
    return template.format(
        wind=observation.wind_speed,
        temperature=observation.temperature,
        observed_at=observation.observed_at.strftime("%H:%M:%S"),
    )


def format_work_started(window: TwilightWindow) -> str:
    return WORK_STARTED_TEMPLATE.format(
        dusk=window.dusk.strftime("%H:%M"),
        dawn=window.dawn.strftime("%H:%M"),
    )


def format_work_ended() -> str:
    return WORK_ENDED_TEXT
