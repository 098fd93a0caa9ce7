"""
Contact Form Views

Public API endpoints for contact form submission and form configuration.
"""
import logging
from collections.abc import Mapping

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import ParseError, UnsupportedMediaType
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.recaptcha_service import recaptcha_service
from .exceptions import (
    ContactFormError,
    InvalidRequestBody,
    PersistenceFailure,
    SchemaValidationFailed,
    UnexpectedFailure,
    VerificationFailed,
)
from .rate_limiting import rate_limit_contact_form, get_client_ip
from .serializers import ContactFormSubmitSerializer
from .tasks import send_staff_notification, send_submitter_confirmation
from .validation import (
    COUNTRY_CODES,
    SERVICE_INTERESTS,
    BUDGET_RANGES,
    DEFAULT_COUNTRY_CODE,
)

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Thank you! We will get back to you soon."


def dispatch_submission_emails(submission):
    """Queue both emails without waiting on them; a failure to queue one never affects the other."""
    for task in (send_staff_notification, send_submitter_confirmation):
        try:
            task.delay(str(submission.id))
        except Exception:
            logger.exception(f"Failed to queue {task.name} for {submission.reference}")


class ContactFormSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/contact/submit

    No authentication required. Rate limited per client IP, then checked with
    reCAPTCHA, validated, stored, and acknowledged by email.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def http_method_not_allowed(self, request, *args, **kwargs):
        return Response(
            {'success': False, 'message': 'Method not allowed'},
            status=status.HTTP_405_METHOD_NOT_ALLOWED,
            headers={'Allow': ', '.join(self.allowed_methods)}
        )

    @rate_limit_contact_form()
    def post(self, request):
        """Submit a contact form."""
        ip_address = get_client_ip(request)
        user_agent = request.META.get('HTTP_USER_AGENT') or 'unknown'

        try:
            submission, verification = self._accept(request, ip_address, user_agent)
        except ContactFormError as exc:
            return Response(exc.to_payload(), status=exc.status_code)
        except Exception:
            logger.exception("Contact form error")
            exc = UnexpectedFailure()
            return Response(exc.to_payload(), status=exc.status_code)

        dispatch_submission_emails(submission)

        score = verification.score if verification.score is not None else 'N/A'
        logger.info(f"New contact: {submission.id} - {submission.email} (Score: {score})")

        return Response(
            {
                'success': True,
                'message': SUCCESS_MESSAGE,
                'contactId': str(submission.id)
            },
            status=status.HTTP_201_CREATED
        )

    def _accept(self, request, ip_address, user_agent):
        try:
            data = request.data
        except (ParseError, UnsupportedMediaType) as e:
            raise InvalidRequestBody() from e

        token = data.get('captchaToken') if isinstance(data, Mapping) else None
        verification = recaptcha_service.verify_token(
            str(token) if token is not None else '',
            user_ip=ip_address
        )
        if not verification.success:
            raise VerificationFailed()

        serializer = ContactFormSubmitSerializer(data=data)
        if not serializer.is_valid():
            raise SchemaValidationFailed(errors=serializer.field_errors)

        try:
            submission = serializer.save(
                captcha_score=verification.score,
                ip_address=ip_address,
                user_agent=user_agent
            )
        except DatabaseError as e:
            logger.exception("Failed to store contact submission")
            raise PersistenceFailure() from e

        return submission, verification


class ContactFormConfigView(APIView):
    """
    Public configuration for rendering the contact form.

    GET /api/contact/config
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        site_key = recaptcha_service.site_key
        return Response({
            'siteKey': site_key,
            'captchaEnabled': bool(site_key),
            'defaultCountryCode': DEFAULT_COUNTRY_CODE,
            'countryCodes': [
                {
                    'code': country['code'],
                    'country': country['country'],
                    'minLength': country['min_length'],
                    'maxLength': country['max_length'],
                }
                for country in COUNTRY_CODES
            ],
            'serviceInterests': [
                {'value': value, 'label': label} for value, label in SERVICE_INTERESTS
            ],
            'budgetRanges': [
                {'value': value, 'label': label} for value, label in BUDGET_RANGES
            ],
        })
