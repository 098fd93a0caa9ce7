"""
Contact Form Client

Drives the public contact endpoint the way the website's form does: holds the
field values, validates locally as fields change and before submitting,
fetches a reCAPTCHA token, posts JSON, and tracks the submission state.

    client = ContactFormClient('https://example.com', site_key='...', token_provider=provider)
    client.mount()
    client.update_field('name', 'Jane Doe')
    ...
    if client.submit():
        print(client.submit_message)

Local validation is only for quick feedback; the server re-validates everything.
"""
import logging

import requests

from core.recaptcha_service import CAPTCHA_ERROR, CAPTCHA_FAILED, NO_CAPTCHA_AVAILABLE
from .validation import (
    DEFAULT_COUNTRY_CODE,
    phone_error_message,
    validate_contact_fields,
    validate_phone_number,
)

logger = logging.getLogger(__name__)

SUBMIT_PATH = '/api/contact/submit'
CONFIG_PATH = '/api/contact/config'
CAPTCHA_ACTION = 'contact_form'

SUCCESS_MESSAGE = (
    "Thank you! We've sent a confirmation email. "
    "We'll get back to you within 24 hours."
)
GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."

FORM_FIELDS = (
    'name', 'email', 'phone', 'countryCode', 'company',
    'subject', 'serviceInterest', 'budgetRange', 'message',
)


class SubmitStatus:
    IDLE = 'idle'
    SUBMITTING = 'submitting'
    SUCCESS = 'success'
    ERROR = 'error'


class CaptchaTokenError(Exception):
    """Raised by a token provider when reCAPTCHA refused to issue a token."""


class CaptchaTokenProvider:
    """
    Source of reCAPTCHA tokens.

    ``load`` is called once when the form mounts; ``execute`` once per
    submission. Implementations wrap whatever runs the reCAPTCHA challenge.
    """

    def load(self, site_key):
        pass

    def execute(self, site_key, action):
        raise NotImplementedError


def empty_form():
    data = dict.fromkeys(FORM_FIELDS, '')
    data['countryCode'] = DEFAULT_COUNTRY_CODE
    return data


class ContactFormClient:
    """State machine for one contact form: idle -> submitting -> success | error."""

    def __init__(self, base_url, site_key=None, token_provider=None, session=None, timeout=15):
        self.base_url = base_url.rstrip('/')
        self.site_key = site_key
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.timeout = timeout

        self.form_data = empty_form()
        self.errors = {}
        self.status = SubmitStatus.IDLE
        self.submit_message = ''
        self.captcha_loaded = False
        self._captcha_ready = False

    @property
    def is_submitting(self):
        return self.status == SubmitStatus.SUBMITTING

    def load_config(self):
        """Pick up the public site key from the server when none was given."""
        response = self.session.get(f"{self.base_url}{CONFIG_PATH}", timeout=self.timeout)
        response.raise_for_status()
        config = response.json()
        if not self.site_key:
            self.site_key = config.get('siteKey') or None
        return config

    def mount(self):
        """Load reCAPTCHA. A failed load never blocks the form; submissions then carry a placeholder token."""
        if not self.site_key or self.token_provider is None:
            self.captcha_loaded = True
            return

        try:
            self.token_provider.load(self.site_key)
            self._captcha_ready = True
        except Exception as e:
            logger.warning(f"Failed to load reCAPTCHA, proceeding without it: {e}")
        finally:
            self.captcha_loaded = True

    def update_field(self, name, value):
        """Apply an edit, clearing that field's error and re-checking the phone number."""
        if name not in FORM_FIELDS:
            raise KeyError(name)

        self.form_data[name] = value
        self.errors.pop(name, None)

        if self.status in (SubmitStatus.SUCCESS, SubmitStatus.ERROR):
            self.status = SubmitStatus.IDLE
            self.submit_message = ''

        if name in ('phone', 'countryCode'):
            self._check_phone()

    def _check_phone(self):
        phone = self.form_data['phone']
        country_code = self.form_data['countryCode'] or DEFAULT_COUNTRY_CODE
        if phone and not validate_phone_number(phone, country_code):
            self.errors['phone'] = phone_error_message(country_code)
        else:
            self.errors.pop('phone', None)

    def validate_form(self):
        self.errors = validate_contact_fields(self.form_data)
        return not self.errors

    def get_captcha_token(self):
        if not self.site_key or not self.captcha_loaded or not self._captcha_ready:
            logger.warning("reCAPTCHA not available, proceeding without verification")
            return NO_CAPTCHA_AVAILABLE

        try:
            return self.token_provider.execute(self.site_key, action=CAPTCHA_ACTION)
        except CaptchaTokenError as e:
            logger.warning(f"reCAPTCHA execution failed: {e}")
            return CAPTCHA_FAILED
        except Exception as e:
            logger.warning(f"reCAPTCHA error: {e}")
            return CAPTCHA_ERROR

    def submit(self):
        """
        Validate and post the form.

        Returns:
            bool: True when the server accepted the submission
        """
        if self.is_submitting:
            return False

        if not self.validate_form():
            return False

        self.status = SubmitStatus.SUBMITTING
        self.submit_message = ''

        try:
            captcha_token = self.get_captcha_token()
            response = self.session.post(
                f"{self.base_url}{SUBMIT_PATH}",
                json={**self.form_data, 'captchaToken': captcha_token},
                timeout=self.timeout
            )
            result = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Form submission error: {e}")
            self.status = SubmitStatus.ERROR
            self.submit_message = NETWORK_ERROR_MESSAGE
            return False

        if not isinstance(result, dict):
            result = {}

        if response.ok and result.get('success'):
            self.status = SubmitStatus.SUCCESS
            self.submit_message = SUCCESS_MESSAGE
            self.form_data = empty_form()
            self.errors = {}
            return True

        self.status = SubmitStatus.ERROR
        self.submit_message = result.get('message') or GENERIC_ERROR_MESSAGE
        if result.get('errors'):
            self.errors = dict(result['errors'])
        return False
