"""Custom exception classes for the annotation pipeline."""


class AnnotationException(Exception):
    """Base exception for all annotation pipeline errors."""


class ConfigurationError(AnnotationException):
    """Raised when configuration is invalid or missing."""


class PayloadError(AnnotationException):
    """Raised when an assessment payload cannot be read or is not a JSON object."""
