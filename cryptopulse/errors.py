# cryptopulse/errors.py


class FetchError(Exception):
    """Base class for anything that makes a price fetch unusable."""


class NetworkFailure(FetchError):
    """Timeout, connection error or non-2xx response."""


class ResponseShapeError(FetchError):
    """The provider answered, but not with the payload we expected."""


class SeriesMisalignedError(ResponseShapeError):
    """Historical series for different assets do not line up."""
