"""
Contact Form Serializers

Validates and sanitizes contact form submissions. Field names match the JSON
payload sent by the form (camelCase); ``source`` maps them onto the model.
"""
from rest_framework import serializers

from .models import ContactSubmission
from .validation import (
    NAME_MIN_LENGTH,
    NAME_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    COMPANY_MAX_LENGTH,
    SUBJECT_MIN_LENGTH,
    SUBJECT_MAX_LENGTH,
    MESSAGE_MIN_LENGTH,
    MESSAGE_MAX_LENGTH,
    SERVICE_INTERESTS,
    BUDGET_RANGES,
    DISPOSABLE_EMAIL_DOMAINS,
    get_country,
    is_phone_digits,
    normalize_phone,
    phone_error_message,
    sanitize_text,
    validate_phone_number,
)


def _error_messages(label, min_length=None, max_length=None):
    messages = {
        'required': f"{label} is required",
        'blank': f"{label} is required",
        'null': f"{label} is required",
    }
    if min_length:
        messages['min_length'] = f"{label} must be at least {min_length} characters"
    if max_length:
        messages['max_length'] = f"{label} must be no more than {max_length} characters"
    return messages


class ContactFormSubmitSerializer(serializers.Serializer):
    """
    Public contact form submission serializer.

    Validates and sanitizes user input from the contact form. Validated data
    is already cleaned: tags stripped, whitespace trimmed, email lower-cased,
    phone reduced to digits.
    """

    name = serializers.CharField(
        min_length=NAME_MIN_LENGTH,
        max_length=NAME_MAX_LENGTH,
        error_messages=_error_messages('Name', NAME_MIN_LENGTH, NAME_MAX_LENGTH)
    )

    email = serializers.EmailField(
        max_length=EMAIL_MAX_LENGTH,
        error_messages={
            **_error_messages('Email', max_length=EMAIL_MAX_LENGTH),
            'invalid': "Please enter a valid email address",
        }
    )

    phone = serializers.CharField(
        max_length=30,
        error_messages=_error_messages('Phone number', max_length=30)
    )

    countryCode = serializers.CharField(
        source='country_code',
        max_length=6,
        error_messages=_error_messages('Country code', max_length=6)
    )

    company = serializers.CharField(
        max_length=COMPANY_MAX_LENGTH,
        required=False,
        allow_blank=True,
        default='',
        error_messages=_error_messages('Company', max_length=COMPANY_MAX_LENGTH)
    )

    subject = serializers.CharField(
        min_length=SUBJECT_MIN_LENGTH,
        max_length=SUBJECT_MAX_LENGTH,
        error_messages=_error_messages('Subject', SUBJECT_MIN_LENGTH, SUBJECT_MAX_LENGTH)
    )

    serviceInterest = serializers.ChoiceField(
        source='service_interest',
        choices=SERVICE_INTERESTS,
        required=False,
        allow_blank=True,
        default='',
        error_messages={'invalid_choice': "Please select a valid service"}
    )

    budgetRange = serializers.ChoiceField(
        source='budget_range',
        choices=BUDGET_RANGES,
        required=False,
        allow_blank=True,
        default='',
        error_messages={'invalid_choice': "Please select a valid budget range"}
    )

    message = serializers.CharField(
        min_length=MESSAGE_MIN_LENGTH,
        max_length=MESSAGE_MAX_LENGTH,
        error_messages=_error_messages('Message', MESSAGE_MIN_LENGTH, MESSAGE_MAX_LENGTH)
    )

    captchaToken = serializers.CharField(
        source='captcha_token',
        required=False,
        allow_blank=True,
        write_only=True
    )

    # Honeypot field for spam prevention (should be empty)
    website = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        help_text="Honeypot field - should be empty"
    )

    def validate_name(self, value):
        cleaned = sanitize_text(value, single_line=True)
        if len(cleaned) < NAME_MIN_LENGTH:
            raise serializers.ValidationError(
                f"Name must be at least {NAME_MIN_LENGTH} characters"
            )
        return cleaned

    def validate_email(self, value):
        """Reject disposable domains and normalize case."""
        value = value.strip().lower()
        domain = value.rsplit('@', 1)[-1]
        if domain in DISPOSABLE_EMAIL_DOMAINS:
            raise serializers.ValidationError(
                "Disposable email addresses are not allowed"
            )
        return value

    def _submitted_country_code(self):
        """The raw countryCode, trimmed the same way the countryCode field trims it."""
        value = self.initial_data.get('countryCode')
        if isinstance(value, str):
            return value.strip()
        return None

    def validate_phone(self, value):
        """Check the digit count against the submitted country code."""
        digits = normalize_phone(value)
        country_code = self._submitted_country_code()

        if get_country(country_code) is None:
            # The country code carries its own error; only insist on digits here
            if not is_phone_digits(digits):
                raise serializers.ValidationError("Phone number must contain digits only")
            return digits

        if not validate_phone_number(digits, country_code):
            raise serializers.ValidationError(phone_error_message(country_code))
        return digits

    def validate_countryCode(self, value):
        value = value.strip()
        if get_country(value) is None:
            raise serializers.ValidationError("Please select a valid country code")
        return value

    def validate_company(self, value):
        return sanitize_text(value, single_line=True)

    def validate_subject(self, value):
        cleaned = sanitize_text(value, single_line=True)
        if len(cleaned) < SUBJECT_MIN_LENGTH:
            raise serializers.ValidationError(
                f"Subject must be at least {SUBJECT_MIN_LENGTH} characters"
            )
        return cleaned

    def validate_message(self, value):
        cleaned = sanitize_text(value)
        if len(cleaned) < MESSAGE_MIN_LENGTH:
            raise serializers.ValidationError(
                f"Message must be at least {MESSAGE_MIN_LENGTH} characters"
            )
        return cleaned

    def validate_website(self, value):
        """Honeypot validation - should be empty."""
        if value:
            raise serializers.ValidationError("Spam detected")
        return value

    def validate(self, attrs):
        """Re-check the phone against the cleaned country code that will be stored."""
        country_code = attrs.get('country_code')
        if not validate_phone_number(attrs.get('phone'), country_code):
            raise serializers.ValidationError({'phone': phone_error_message(country_code)})
        return attrs

    def create(self, validated_data):
        validated_data.pop('captcha_token', None)
        validated_data.pop('website', None)
        return ContactSubmission.objects.create(**validated_data)

    @property
    def field_errors(self):
        """Flatten DRF's error lists to one message per field."""
        return {
            field: str(messages[0]) if isinstance(messages, list) else str(messages)
            for field, messages in self.errors.items()
        }
