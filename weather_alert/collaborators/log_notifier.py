"""Notifier that writes messages to the log instead of a chat (dev/tests)."""

from weather_alert import messages
from weather_alert.domain import Chart, Observation, TwilightWindow
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="collaborators/log_notifier")


class LogNotifier:
    """Render the same texts as the chat notifier and log them at INFO."""

    def work_started(self, window: TwilightWindow) -> None:
        logger.info("work_started:\n%s", messages.format_work_started(window))

    def work_ended(self) -> None:
        logger.info("work_ended: %s", messages.format_work_ended())

    def update(self, chart: Chart, observation: Observation, hazardous: bool) -> None:
        logger.info(
            "update (chart=%s, hazardous=%s):\n%s",
            chart.path,
            hazardous,
            messages.format_update(observation, hazardous),
        )
