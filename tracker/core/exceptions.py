class TrackerError(Exception):
    """Base class for domain errors raised by the services."""


class ValidationError(TrackerError):
    """A required field is missing or malformed."""


class NotFoundError(TrackerError):
    """No record matches the given key."""


class UpstreamUnavailable(TrackerError):
    """The external quote provider did not return a usable answer."""
