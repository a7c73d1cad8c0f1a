import sys

from weather_alert.config import settings
from weather_alert.errors import ConfigError
from weather_alert.main import build_state_machine, run_forever
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="runner")


def main() -> int:
    """Configure logging, build the monitor, and poll until interrupted."""
    setup_logging(level=settings.log_level, job_name="weather_alert")

    try:
        machine = build_state_machine(settings)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    try:
        run_forever(machine, settings.poll_interval)
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
