# Error codes returned to the web page
ERR_BUSY = "ERR_BUSY"
ERR_NO_IMAGE = "ERR_NO_IMAGE"
ERR_RECOGNITION = "ERR_RECOGNITION"
ERR_UNKNOWN = "ERR_UNKNOWN"

RECOGNITION_FAILED_MESSAGE = "Failed to recognize plate. Please try a clearer image."


class SmartPlateError(Exception):
    """Base class for application errors."""


class RecognitionError(SmartPlateError):
    """The provider returned no usable payload, or it did not match the schema."""


class PersistenceError(SmartPlateError):
    """Local storage could not be read or written."""


class InvalidImageError(SmartPlateError):
    """The submitted image is not a base64 data URL."""
