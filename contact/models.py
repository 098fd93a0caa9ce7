"""
Contact Form Models

Database schema for contact form submissions.
"""
import uuid
from django.db import models
from django.core.validators import MinLengthValidator, EmailValidator

from .validation import (
    NAME_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    COMPANY_MAX_LENGTH,
    SUBJECT_MAX_LENGTH,
    MESSAGE_MIN_LENGTH,
    MESSAGE_MAX_LENGTH,
)


USER_AGENT_MAX_LENGTH = 500


class ContactSubmission(models.Model):
    """
    A contact form submission accepted by the public endpoint.

    Rows are written once, after validation and bot verification, and are
    never updated afterwards.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # Contact Information
    name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        help_text="Name of the person contacting us"
    )

    email = models.EmailField(
        max_length=EMAIL_MAX_LENGTH,
        validators=[EmailValidator()],
        help_text="Email address for follow-up"
    )

    phone = models.CharField(
        max_length=20,
        help_text="National phone number, digits only"
    )

    country_code = models.CharField(
        max_length=6,
        help_text="International dialing code, e.g. +91"
    )

    company = models.CharField(
        max_length=COMPANY_MAX_LENGTH,
        blank=True,
        default=''
    )

    # Inquiry Details
    subject = models.CharField(
        max_length=SUBJECT_MAX_LENGTH,
        help_text="Subject line entered by the submitter"
    )

    service_interest = models.CharField(
        max_length=50,
        blank=True,
        default=''
    )

    budget_range = models.CharField(
        max_length=50,
        blank=True,
        default=''
    )

    message = models.TextField(
        max_length=MESSAGE_MAX_LENGTH,
        validators=[MinLengthValidator(MESSAGE_MIN_LENGTH)],
        help_text=f"The message content (min {MESSAGE_MIN_LENGTH} characters)"
    )

    # Security and Tracking
    captcha_score = models.FloatField(
        null=True,
        blank=True,
        help_text="reCAPTCHA score, empty when verification was skipped"
    )

    ip_address = models.CharField(
        max_length=64,
        blank=True,
        default='',
        help_text="IP address of the submitter (for spam prevention)"
    )

    user_agent = models.TextField(
        blank=True,
        default='',
        help_text="Browser user agent (for spam prevention)"
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the message was submitted"
    )

    class Meta:
        db_table = 'contact_submissions'
        ordering = ['-created_at']
        verbose_name = 'Contact Submission'
        verbose_name_plural = 'Contact Submissions'
        indexes = [
            models.Index(fields=['email'], name='contact_sub_email_idx'),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}> - {self.subject}"

    @property
    def reference(self):
        """Readable reference quoted in emails."""
        return f"CNT-{str(self.id)[:8].upper()}"

    @property
    def full_phone(self):
        return f"{self.country_code} {self.phone}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Contact submissions are immutable once stored")
        if self.user_agent:
            self.user_agent = self.user_agent[:USER_AGENT_MAX_LENGTH]
        super().save(*args, **kwargs)
