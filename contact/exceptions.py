"""
Contact Form Errors

Every way a submission can be refused, each mapped to an HTTP status and the
message shown to the submitter. The view turns these into responses of the
form ``{'success': False, 'message': ..., 'errors': {...}}``.
"""
from rest_framework import status


class ContactFormError(Exception):
    """Base class for submission failures handled at the view boundary."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Unexpected error. Please try again."

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_payload(self):
        payload = {'success': False, 'message': self.message}
        if self.errors:
            payload['errors'] = self.errors
        return payload


class RateLimitExceeded(ContactFormError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests. Please wait a minute."

    def __init__(self, retry_after=0, message=None):
        self.retry_after = retry_after
        super().__init__(message)


class VerificationFailed(ContactFormError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "CAPTCHA verification failed."


class SchemaValidationFailed(ContactFormError):
    """Raised with a ``{field: message}`` map, one message per invalid field."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Please correct the highlighted fields."


class InvalidRequestBody(ContactFormError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request body."


class PersistenceFailure(ContactFormError):
    pass


class UnexpectedFailure(ContactFormError):
    pass
