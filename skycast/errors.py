# ABOUTME: Error kinds raised by the resolution and synthesis pipeline.
# ABOUTME: The orchestrator catches these at its boundary and turns them into session state.


class SkyCastError(Exception):
    """Base class for all pipeline errors."""


class GeocodingFailure(SkyCastError):
    """The place lookup itself failed. Retryable by re-submitting."""


class LocationNotFound(SkyCastError):
    """A lookup completed but produced zero candidates."""


class InvalidTimezone(SkyCastError):
    """A timezone id could not be loaded from the IANA database."""


class GeolocationError(SkyCastError):
    """Device position could not be obtained."""

    code = 2

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class GeolocationUnsupported(GeolocationError):
    code = 0


class GeolocationDenied(GeolocationError):
    code = 1


class SynthesisFailure(SkyCastError):
    """Generating the weather bundle failed unexpectedly."""


class HourlyWindowUnavailable(SkyCastError):
    """The hourly series or its timezone is missing at selection time."""
