"""Error taxonomy shared by services, agents and routes."""


class HavenError(Exception):
    """Base error. Routes turn it into a JSON body carrying the message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldError(HavenError):
    """A required request field is absent. Raised before any model call."""

    status_code = 400


class InvalidOptionError(HavenError):
    """Unknown action, template or platform."""

    status_code = 400


class ConfigurationError(HavenError):
    """An API key or connection string the route depends on is not set."""

    status_code = 500


class ModelResponseError(HavenError):
    """The model answered but the text could not be parsed into the expected shape."""

    status_code = 500


class ModelTimeoutError(HavenError):
    status_code = 504


class DatastoreError(HavenError):
    status_code = 500


def require(fields: dict, *names: str, message: str | None = None) -> None:
    """Raise MissingFieldError naming the first empty field in ``names``."""
    for name in names:
        value = fields.get(name)
        if value is None or (isinstance(value, (str, list, dict)) and not value):
            raise MissingFieldError(message or f"{name} is required")
        if isinstance(value, str) and not value.strip():
            raise MissingFieldError(message or f"{name} is required")


class NotFoundError(HavenError):
    """A node, asset or profile the request names does not exist."""

    status_code = 404
