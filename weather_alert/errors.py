"""Exception types raised by the monitor and its collaborators."""


class WeatherAlertError(Exception):
    """Base class for every error raised by this package."""


class ScheduleError(WeatherAlertError):
    """The twilight window could not be computed for the requested night."""


class CollaboratorError(WeatherAlertError):
    """An external collaborator (feed, chart, chat) failed during a tick."""


class FetchError(CollaboratorError):
    """Upstream data could not be retrieved."""


class ParseError(CollaboratorError):
    """Upstream data was retrieved but could not be understood."""


class DeliveryError(CollaboratorError):
    """A notification could not be delivered."""


class ConfigError(WeatherAlertError):
    """Configuration is missing or inconsistent; raised at startup only."""
