from __future__ import annotations


class AppError(Exception):
    # Base class for domain errors (intended, meaningful failures).
    status_code: int = 500


class ValidationError(AppError):
    # Raised when an aggregation request is missing questionnaireId/questionIds.
    status_code = 400


class NotFoundError(AppError):
    # Raised when the questionnaire (or its schema) does not exist.
    status_code = 404


class InsufficientDataError(AppError):
    # Raised when there are no responses to aggregate at all.
    status_code = 422


class SchemaError(AppError):
    # Raised when a raw questionnaire schema cannot be parsed (duplicate ids, bad shape).
    status_code = 422


class RenderConfigError(AppError):
    # Raised when a report template is missing the config its type requires.
    status_code = 422
