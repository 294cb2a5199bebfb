"""Weather-side error taxonomy.

Every failure the OpenWeather client can surface is one of these classes.
``user_message`` is the text shown to the user; ``str(err)`` carries the
technical detail for logs.
"""


class WeatherError(Exception):
    """Base class for weather API failures."""

    user_message = "Failed to fetch weather data. Please try again."

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message or self.user_message)
        self.status_code = status_code


class InvalidURLError(WeatherError):
    user_message = "Invalid request"


class ServerError(WeatherError):
    user_message = "Server error. Please try again later."


class DecodingError(WeatherError):
    user_message = "Failed to process weather data"


class NetworkError(WeatherError):
    user_message = "No internet connection"


class InvalidAPIKeyError(WeatherError):
    user_message = "API key is invalid. Please check configuration."


class LocationNotFoundError(WeatherError):
    user_message = "Location not found"


class RateLimitExceededError(WeatherError):
    user_message = "Too many requests. Please try again later."


STATUS_ERRORS: dict[int, type[WeatherError]] = {
    401: InvalidAPIKeyError,
    404: LocationNotFoundError,
    429: RateLimitExceededError,
}


def error_for_status(status_code: int) -> WeatherError:
    """Map a non-200 HTTP status to its taxonomy error."""
    cls = STATUS_ERRORS.get(status_code, ServerError)
    return cls(f"HTTP {status_code}", status_code=status_code)
