"""Notifier that talks to a single Telegram chat through the Bot API."""
from __future__ import annotations

import json
from typing import Any, Optional

import requests

from weather_alert import messages
from weather_alert.domain import Chart, Observation, TwilightWindow
from weather_alert.errors import DeliveryError
from utils.logging_utils import get_tagged_logger, mask_bot_token

logger = get_tagged_logger(__name__, tag="collaborators/telegram")

PARSE_MODE = "Markdown"


class TelegramNotifier:
    """
    Chart updates are kept in one message per hazard phase: the first
    update of the night and every change of the hazardous flag post a new
    photo, anything else edits the last photo in place.
    """

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        session: requests.Session,
        *,
        api_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
    ) -> None:
        self.chat_id = chat_id
        self.session = session
        self.timeout = timeout
        self._base_url = f"{api_url.rstrip('/')}/bot{bot_token}"
        self._last_chart_id: Optional[int] = None
        self._last_hazardous: Optional[bool] = None

    def work_started(self, window: TwilightWindow) -> None:
        self._call("sendMessage", data={
            "chat_id": self.chat_id,
            "text": messages.format_work_started(window),
            "parse_mode": PARSE_MODE,
        })
        self._last_chart_id = None
        self._last_hazardous = None

    def work_ended(self) -> None:
        self._call("sendMessage", data={
            "chat_id": self.chat_id,
            "text": messages.format_work_ended(),
            "parse_mode": PARSE_MODE,
        })

    def update(self, chart: Chart, observation: Observation, hazardous: bool) -> None:
        caption = messages.format_update(observation, hazardous)
        new_message = self._last_chart_id is None or hazardous != self._last_hazardous

        try:
            with open(chart.path, "rb") as fh:
                files = {"photo": (chart.path, fh, "image/png")}
                if new_message:
                    result = self._call("sendPhoto", data={
                        "chat_id": self.chat_id,
                        "caption": caption,
                        "parse_mode": PARSE_MODE,
                    }, files=files)
                else:
                    media = {
                        "type": "photo",
                        "media": "attach://photo",
                        "caption": caption,
                        "parse_mode": PARSE_MODE,
                    }
                    try:
                        result = self._call("editMessageMedia", data={
                            "chat_id": self.chat_id,
                            "message_id": self._last_chart_id,
                            "media": json.dumps(media),
                        }, files=files)
                    except DeliveryError:
                        # the next update posts a fresh photo instead
                        self._last_chart_id = None
                        raise
        except OSError as exc:
            raise DeliveryError(f"cannot read chart {chart.path}: {exc}") from exc

        if isinstance(result, dict) and "message_id" in result:
            self._last_chart_id = int(result["message_id"])
        self._last_hazardous = hazardous
        logger.info(
            "%s chart update (hazardous=%s, message_id=%s)",
            "Sent new" if new_message else "Edited",
            hazardous,
            self._last_chart_id,
        )

    def _call(self, method: str, *, data: dict[str, Any], files: Optional[dict] = None) -> Any:
        """POST a Bot API method and return its `result`, raising DeliveryError on failure."""
        url = f"{self._base_url}/{method}"
        try:
            resp = self.session.post(url, data=data, files=files, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            # requests puts the full URL, token included, into its messages
            detail = mask_bot_token(str(exc))
            raise DeliveryError(f"Telegram {method} failed: {detail}") from None

        try:
            payload = resp.json()
        except ValueError:
            payload = {}

        if resp.status_code != 200 or not payload.get("ok", False):
            description = payload.get("description") or (resp.text or "")[:200]
            raise DeliveryError(
                f"Telegram {method} rejected ({resp.status_code}) at {mask_bot_token(url)}: {description}"
            )
        return payload.get("result")
