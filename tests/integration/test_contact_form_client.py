"""
Tests for the contact form client: local validation, submission state,
reCAPTCHA placeholder tokens, and an end-to-end run against a live server.

Run with: pytest tests/integration/test_contact_form_client.py -v
"""
from unittest.mock import Mock

import pytest
import requests

from contact.form_client import (
    GENERIC_ERROR_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    SUCCESS_MESSAGE,
    CaptchaTokenError,
    CaptchaTokenProvider,
    ContactFormClient,
    SubmitStatus,
)
from contact.models import ContactSubmission


# =============================================================================
# FIXTURES
# =============================================================================

def json_response(body, status_code=201):
    response = Mock(status_code=status_code, ok=status_code < 400)
    response.json.return_value = body
    return response


@pytest.fixture
def session():
    session = Mock()
    session.post.return_value = json_response({
        'success': True,
        'message': 'Thank you! We will get back to you soon.',
        'contactId': '6f1c2a7e-0000-0000-0000-000000000000',
    })
    return session


@pytest.fixture
def filled_client(session):
    client = ContactFormClient('https://example.com/', session=session)
    client.mount()
    for name, value in {
        'name': 'Priya Sharma',
        'email': 'priya@example.com',
        'phone': '9876543210',
        'subject': 'Website redesign',
        'message': 'We would like a quote for redesigning our marketing site.',
    }.items():
        client.update_field(name, value)
    return client


class StaticTokenProvider(CaptchaTokenProvider):

    def __init__(self, token='issued-token', load_error=None, execute_error=None):
        self.token = token
        self.load_error = load_error
        self.execute_error = execute_error
        self.actions = []

    def load(self, site_key):
        if self.load_error:
            raise self.load_error

    def execute(self, site_key, action):
        self.actions.append(action)
        if self.execute_error:
            raise self.execute_error
        return self.token


def sent_payload(session):
    return session.post.call_args.kwargs['json']


# =============================================================================
# LOCAL VALIDATION
# =============================================================================

class TestFieldValidation:

    def test_phone_checked_as_it_is_typed(self, session):
        client = ContactFormClient('https://example.com', session=session)

        client.update_field('phone', '98765')
        assert client.errors['phone'] == 'Please enter a valid 10-digit phone number for India'

        client.update_field('phone', '9876543210')
        assert 'phone' not in client.errors

    def test_changing_country_rechecks_phone(self, session):
        client = ContactFormClient('https://example.com', session=session)
        client.update_field('phone', '91234567')
        assert 'phone' in client.errors

        client.update_field('countryCode', '+65')

        assert 'phone' not in client.errors

    def test_edit_clears_field_error(self, session):
        client = ContactFormClient('https://example.com', session=session)
        client.validate_form()
        assert 'name' in client.errors

        client.update_field('name', 'P')

        assert 'name' not in client.errors

    def test_unknown_field(self, session):
        client = ContactFormClient('https://example.com', session=session)

        with pytest.raises(KeyError):
            client.update_field('favouriteColour', 'blue')

    def test_invalid_form_is_not_submitted(self, filled_client, session):
        filled_client.update_field('phone', '12345')

        assert filled_client.submit() is False
        assert filled_client.status == SubmitStatus.IDLE
        assert set(filled_client.errors) == {'phone'}
        session.post.assert_not_called()

    @pytest.mark.parametrize('phone', ['²' * 10, '٩٨٧٦٥٤٣٢١٠'])
    def test_non_ascii_digits_rejected(self, filled_client, session, phone):
        filled_client.update_field('phone', phone)
        assert filled_client.errors['phone'] == 'Please enter a valid 10-digit phone number for India'

        assert filled_client.submit() is False
        session.post.assert_not_called()

    def test_empty_form_errors(self, session):
        client = ContactFormClient('https://example.com', session=session)

        assert client.validate_form() is False
        assert set(client.errors) == {'name', 'email', 'phone', 'subject', 'message'}
        assert client.errors['phone'] == 'Phone number is required'


# =============================================================================
# SUBMISSION
# =============================================================================

class TestSubmission:

    def test_successful_submission_resets_form(self, filled_client, session):
        assert filled_client.submit() is True

        assert filled_client.status == SubmitStatus.SUCCESS
        assert filled_client.submit_message == SUCCESS_MESSAGE
        assert filled_client.form_data['name'] == ''
        assert filled_client.form_data['countryCode'] == '+91'

        args, kwargs = session.post.call_args
        assert args[0] == 'https://example.com/api/contact/submit'
        assert kwargs['json']['name'] == 'Priya Sharma'
        assert kwargs['json']['countryCode'] == '+91'

    def test_second_submit_while_posting_is_ignored(self, filled_client, session):
        repeat_results = []

        def slow_post(*args, **kwargs):
            repeat_results.append(filled_client.submit())
            return json_response({'success': True})

        session.post.side_effect = slow_post

        assert filled_client.submit() is True

        assert repeat_results == [False]
        assert session.post.call_count == 1

    def test_edit_after_success_returns_to_idle(self, filled_client):
        filled_client.submit()

        filled_client.update_field('name', 'Another Person')

        assert filled_client.status == SubmitStatus.IDLE
        assert filled_client.submit_message == ''

    def test_server_field_errors_are_shown(self, filled_client, session):
        session.post.return_value = json_response({
            'success': False,
            'message': 'Please correct the highlighted fields.',
            'errors': {'email': 'Disposable email addresses are not allowed'},
        }, status_code=400)

        assert filled_client.submit() is False

        assert filled_client.status == SubmitStatus.ERROR
        assert filled_client.submit_message == 'Please correct the highlighted fields.'
        assert filled_client.errors == {'email': 'Disposable email addresses are not allowed'}
        assert filled_client.form_data['name'] == 'Priya Sharma'

    def test_rate_limited(self, filled_client, session):
        session.post.return_value = json_response({
            'success': False,
            'message': 'Too many requests. Please wait a minute.',
        }, status_code=429)

        filled_client.submit()

        assert filled_client.status == SubmitStatus.ERROR
        assert filled_client.submit_message == 'Too many requests. Please wait a minute.'

    def test_error_without_message(self, filled_client, session):
        session.post.return_value = json_response({}, status_code=500)

        filled_client.submit()

        assert filled_client.submit_message == GENERIC_ERROR_MESSAGE

    def test_network_error(self, filled_client, session):
        session.post.side_effect = requests.ConnectionError('offline')

        assert filled_client.submit() is False

        assert filled_client.status == SubmitStatus.ERROR
        assert filled_client.submit_message == NETWORK_ERROR_MESSAGE

    def test_unreadable_response(self, filled_client, session):
        response = Mock(status_code=502, ok=False)
        response.json.side_effect = ValueError('not json')
        session.post.return_value = response

        filled_client.submit()

        assert filled_client.submit_message == NETWORK_ERROR_MESSAGE


# =============================================================================
# RECAPTCHA TOKENS
# =============================================================================

class TestCaptchaTokens:

    def make_client(self, session, provider, site_key='site-key'):
        client = ContactFormClient('https://example.com', site_key=site_key,
                                   token_provider=provider, session=session)
        client.mount()
        for name, value in {
            'name': 'Priya Sharma',
            'email': 'priya@example.com',
            'phone': '9876543210',
            'subject': 'Website redesign',
            'message': 'We would like a quote for redesigning our marketing site.',
        }.items():
            client.update_field(name, value)
        return client

    def test_no_site_key_sends_placeholder(self, filled_client, session):
        filled_client.submit()

        assert sent_payload(session)['captchaToken'] == 'no-captcha-available'

    def test_issued_token_is_sent(self, session):
        provider = StaticTokenProvider()
        client = self.make_client(session, provider)

        client.submit()

        assert sent_payload(session)['captchaToken'] == 'issued-token'
        assert provider.actions == ['contact_form']

    def test_failed_load_sends_placeholder(self, session):
        client = self.make_client(session, StaticTokenProvider(load_error=OSError('blocked')))

        assert client.captcha_loaded is True
        client.submit()

        assert sent_payload(session)['captchaToken'] == 'no-captcha-available'

    def test_refused_token(self, session):
        provider = StaticTokenProvider(execute_error=CaptchaTokenError('refused'))
        client = self.make_client(session, provider)

        client.submit()

        assert sent_payload(session)['captchaToken'] == 'captcha-failed'

    def test_provider_error(self, session):
        provider = StaticTokenProvider(execute_error=RuntimeError('broken'))
        client = self.make_client(session, provider)

        client.submit()

        assert sent_payload(session)['captchaToken'] == 'captcha-error'

    def test_load_config_picks_up_site_key(self, session):
        session.get.return_value = json_response({'siteKey': 'from-server'}, status_code=200)
        client = ContactFormClient('https://example.com', session=session)

        client.load_config()

        assert client.site_key == 'from-server'
        session.get.assert_called_once_with('https://example.com/api/contact/config', timeout=15)


# =============================================================================
# END TO END
# =============================================================================

@pytest.mark.django_db(transaction=True)
def test_submission_against_live_server(live_server, mailoutbox):
    client = ContactFormClient(live_server.url)
    client.load_config()
    client.mount()
    client.update_field('name', 'Priya Sharma')
    client.update_field('email', 'priya@example.com')
    client.update_field('phone', '98765 43210')
    client.update_field('subject', 'Website redesign')
    client.update_field('message', 'We would like a quote for redesigning our marketing site.')

    assert client.submit() is True

    submission = ContactSubmission.objects.get()
    assert submission.phone == '9876543210'
    assert submission.captcha_score is None
    assert len(mailoutbox) == 2
