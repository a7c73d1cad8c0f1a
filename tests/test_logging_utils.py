import logging
import unittest

from utils import logging_utils
from utils.logging_utils import build_logging_config, get_tagged_logger, mask_bot_token


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        self.records.append(record)


class TestLoggingUtils(unittest.TestCase):
    def test_build_logging_config_routes_levels(self):
        cfg = build_logging_config(job_name="weather_alert")
        self.assertEqual(cfg["filters"]["job_name"]["job_name"], "weather_alert")
        self.assertIn("stdout_max_info", cfg["handlers"]["stdout"]["filters"])
        self.assertEqual(cfg["handlers"]["stderr"]["level"], "WARNING")

    def test_get_tagged_logger_injects_tag(self):
        handler = _ListHandler()
        logger = get_tagged_logger("weather_alert.monitor", tag="monitor")
        base_logger = logger.logger
        base_logger.setLevel(logging.DEBUG)
        base_logger.addHandler(handler)
        base_logger.propagate = False
        try:
            logger.info("tick")
            self.assertEqual(handler.records[-1].tag, "monitor")
        finally:
            base_logger.removeHandler(handler)
            base_logger.propagate = True

    def test_tag_defaults_to_last_name_segment(self):
        logger = get_tagged_logger("weather_alert.collaborators.chart")
        self.assertEqual(logger.extra["tag"], "chart")

    def test_ensure_tag_filter_fills_missing_tag(self):
        record = logging.LogRecord("urllib3.connectionpool", logging.INFO, __file__, 1, "msg", None, None)
        logging_utils.EnsureTagFilter().filter(record)
        self.assertEqual(record.tag, "connectionpool")

    def test_max_level_filter(self):
        f = logging_utils.MaxLevelFilter(logging.INFO)
        info = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        warning = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg", None, None)
        self.assertTrue(f.filter(info))
        self.assertFalse(f.filter(warning))

    def test_setup_logging_override_applies_filters(self):
        root = logging.getLogger()
        orig_handlers = root.handlers[:]
        orig_level = root.level
        try:
            logging_utils.setup_logging(level="INFO", job_name="jobtest", override_existing=True)
            self.assertTrue(
                any(
                    any(f.__class__.__name__ == "JobNameFilter" for f in h.filters)
                    for h in root.handlers
                )
            )
        finally:
            root.handlers = orig_handlers
            root.setLevel(orig_level)
            logging_utils._CONFIGURED = False


class TestMaskBotToken(unittest.TestCase):
    def test_masks_token_in_api_url(self):
        url = "https://api.telegram.org/bot123456:AAE-x_y/sendPhoto"
        self.assertEqual(mask_bot_token(url), "https://api.telegram.org/bot***/sendPhoto")

    def test_masks_every_occurrence_in_error_text(self):
        text = "url: /bot1:a/sendMessage (Caused by ... /bot1:a/sendMessage)"
        self.assertEqual(mask_bot_token(text), "url: /bot***/sendMessage (Caused by ... /bot***/sendMessage)")

    def test_leaves_other_urls_alone(self):
        url = "https://www.sao.ru/tb/tcs/meteo/meteo_today.cgi"
        self.assertEqual(mask_bot_token(url), url)
        self.assertEqual(mask_bot_token("https://example.com/bottles/1"), "https://example.com/bottles/1")


if __name__ == "__main__":
    unittest.main()
