"""
Contact Form Validation Rules

Field rules shared by the server-side serializer and the form client.
The client runs ``validate_contact_fields`` for immediate feedback; the
serializer is authoritative and reuses the same limits and phone rule.
"""
import re

from django.utils.html import strip_tags


NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
COMPANY_MAX_LENGTH = 200
SUBJECT_MIN_LENGTH = 3
SUBJECT_MAX_LENGTH = 200
MESSAGE_MIN_LENGTH = 20
MESSAGE_MAX_LENGTH = 5000

DEFAULT_COUNTRY_CODE = '+91'

# Dialing code, country, and the allowed digit count of the national number
COUNTRY_CODES = [
    {'code': '+91', 'country': 'India', 'min_length': 10, 'max_length': 10},
    {'code': '+1', 'country': 'United States', 'min_length': 10, 'max_length': 10},
    {'code': '+44', 'country': 'United Kingdom', 'min_length': 10, 'max_length': 10},
    {'code': '+61', 'country': 'Australia', 'min_length': 9, 'max_length': 9},
    {'code': '+971', 'country': 'United Arab Emirates', 'min_length': 9, 'max_length': 9},
    {'code': '+65', 'country': 'Singapore', 'min_length': 8, 'max_length': 8},
    {'code': '+49', 'country': 'Germany', 'min_length': 10, 'max_length': 11},
    {'code': '+33', 'country': 'France', 'min_length': 9, 'max_length': 9},
    {'code': '+81', 'country': 'Japan', 'min_length': 10, 'max_length': 10},
    {'code': '+86', 'country': 'China', 'min_length': 11, 'max_length': 11},
    {'code': '+27', 'country': 'South Africa', 'min_length': 9, 'max_length': 9},
    {'code': '+233', 'country': 'Ghana', 'min_length': 9, 'max_length': 9},
]

SERVICE_INTERESTS = [
    ('web-development', 'Web Development'),
    ('mobile-development', 'Mobile App Development'),
    ('ui-ux-design', 'UI/UX Design'),
    ('cloud-devops', 'Cloud & DevOps'),
    ('ai-ml', 'AI & Machine Learning'),
    ('consulting', 'Technical Consulting'),
    ('other', 'Other'),
]

BUDGET_RANGES = [
    ('under-5k', 'Under $5,000'),
    ('5k-15k', '$5,000 - $15,000'),
    ('15k-50k', '$15,000 - $50,000'),
    ('50k-plus', '$50,000+'),
    ('not-sure', 'Not sure yet'),
]

DISPOSABLE_EMAIL_DOMAINS = frozenset({
    'tempmail.com', 'throwaway.email', '10minutemail.com',
    'guerrillamail.com', 'mailinator.com', 'trashmail.com',
})

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_SEPARATORS = re.compile(r'[\s\-.()]')
WHITESPACE = re.compile(r'\s+')


def get_country(code):
    """Return the COUNTRY_CODES entry for a dialing code, or None."""
    for country in COUNTRY_CODES:
        if country['code'] == code:
            return country
    return None


def normalize_phone(value):
    """Drop the separators people type between digit groups."""
    return PHONE_SEPARATORS.sub('', value or '')


def is_phone_digits(value):
    """True for a non-empty run of ASCII 0-9 only."""
    return bool(value) and value.isascii() and value.isdigit()


def validate_phone_number(phone, country_code):
    """True if ``phone`` has the right number of digits for ``country_code``."""
    country = get_country(country_code)
    if country is None:
        return False

    digits = normalize_phone(phone)
    if not is_phone_digits(digits):
        return False

    return country['min_length'] <= len(digits) <= country['max_length']


def phone_error_message(country_code):
    country = get_country(country_code)
    if country is None:
        return "Please select a valid country code"

    if country['min_length'] == country['max_length']:
        digits = f"{country['max_length']}-digit"
    else:
        digits = f"{country['min_length']}-{country['max_length']} digit"
    return f"Please enter a valid {digits} phone number for {country['country']}"


def is_valid_email(value):
    return bool(value) and EMAIL_PATTERN.match(value) is not None


def sanitize_text(value, single_line=False):
    """Strip HTML tags and surrounding whitespace; collapse runs of whitespace in one-line fields."""
    cleaned = strip_tags(value or '').strip()
    if single_line:
        cleaned = WHITESPACE.sub(' ', cleaned)
    return cleaned


def validate_contact_fields(data):
    """
    Client-side subset of the contact form rules.

    Args:
        data: dict keyed by the wire field names (name, email, phone, countryCode, ...)

    Returns:
        dict: field name -> error message, empty when the form is valid
    """
    errors = {}

    name = (data.get('name') or '').strip()
    if len(name) < NAME_MIN_LENGTH:
        errors['name'] = f"Name must be at least {NAME_MIN_LENGTH} characters"

    if not is_valid_email((data.get('email') or '').strip()):
        errors['email'] = "Please enter a valid email address"

    phone = data.get('phone') or ''
    country_code = data.get('countryCode') or DEFAULT_COUNTRY_CODE
    if not phone:
        errors['phone'] = "Phone number is required"
    elif not validate_phone_number(phone, country_code):
        errors['phone'] = phone_error_message(country_code)

    subject = (data.get('subject') or '').strip()
    if len(subject) < SUBJECT_MIN_LENGTH:
        errors['subject'] = f"Subject must be at least {SUBJECT_MIN_LENGTH} characters"

    message = (data.get('message') or '').strip()
    if len(message) < MESSAGE_MIN_LENGTH:
        errors['message'] = f"Message must be at least {MESSAGE_MIN_LENGTH} characters"

    return errors
