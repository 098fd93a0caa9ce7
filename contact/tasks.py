"""
Contact Form Email Tasks

Celery tasks for the two emails sent for every accepted submission: a
notification to the support inbox and a confirmation to the submitter.
Both are best-effort; failures are logged and not retried.
"""
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from .models import ContactSubmission
from .validation import SERVICE_INTERESTS, BUDGET_RANGES

logger = logging.getLogger(__name__)


def _label(choices, value):
    return dict(choices).get(value, value) or 'Not specified'


def _from_email():
    return getattr(settings, 'CONTACT_EMAIL_FROM', settings.DEFAULT_FROM_EMAIL)


def _send(subject, text_template, html_template, context, to, reply_to):
    email = EmailMultiAlternatives(
        subject=subject,
        body=render_to_string(text_template, context),
        from_email=_from_email(),
        to=to,
        reply_to=reply_to
    )
    email.attach_alternative(render_to_string(html_template, context), "text/html")
    email.send(fail_silently=False)


@shared_task
def send_staff_notification(submission_id):
    """
    Send notification email to staff about a new contact submission.

    Args:
        submission_id: UUID of the ContactSubmission
    """
    try:
        submission = ContactSubmission.objects.get(id=submission_id)
    except ContactSubmission.DoesNotExist:
        logger.error(f"Staff notification skipped: contact submission {submission_id} not found")
        return f"Contact submission {submission_id} not found"

    context = {
        'submission': submission,
        'service_interest': _label(SERVICE_INTERESTS, submission.service_interest),
        'budget_range': _label(BUDGET_RANGES, submission.budget_range),
        'admin_url': getattr(settings, 'ADMIN_URL', 'http://localhost:8000/admin'),
    }
    support_email = getattr(settings, 'CONTACT_EMAIL_TO', 'support@example.com')

    try:
        _send(
            subject=f"New Contact Form Submission - {submission.subject}",
            text_template='contact/emails/staff_notification.txt',
            html_template='contact/emails/staff_notification.html',
            context=context,
            to=[support_email],
            reply_to=[submission.email]
        )
    except Exception:
        logger.exception(f"Failed to send staff notification for {submission.reference}")
        raise

    logger.info(f"Staff notification sent for {submission.reference}")
    return f"Staff notification sent for {submission.reference}"


@shared_task
def send_submitter_confirmation(submission_id):
    """
    Send confirmation email to the contact form submitter.

    Args:
        submission_id: UUID of the ContactSubmission
    """
    try:
        submission = ContactSubmission.objects.get(id=submission_id)
    except ContactSubmission.DoesNotExist:
        logger.error(f"Confirmation skipped: contact submission {submission_id} not found")
        return f"Contact submission {submission_id} not found"

    context = {
        'submission': submission,
        'service_interest': _label(SERVICE_INTERESTS, submission.service_interest),
    }
    reply_to = getattr(settings, 'CONTACT_EMAIL_REPLY_TO', 'support@example.com')

    try:
        _send(
            subject="We've received your message",
            text_template='contact/emails/confirmation.txt',
            html_template='contact/emails/confirmation.html',
            context=context,
            to=[submission.email],
            reply_to=[reply_to]
        )
    except Exception:
        logger.exception(f"Failed to send confirmation to {submission.email}")
        raise

    logger.info(f"Confirmation sent to {submission.email}")
    return f"Confirmation sent to {submission.email}"
