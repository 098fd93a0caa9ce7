"""
Tests for the public contact form endpoint.
"""
import smtplib
from unittest.mock import Mock, patch

import pytest
from django.db import DatabaseError
from rest_framework import status
from rest_framework.test import APIClient

from contact.models import ContactSubmission
from contact.rate_limiting import contact_rate_limiter

pytestmark = pytest.mark.django_db

SUBMIT_URL = '/api/contact/submit'
CONFIG_URL = '/api/contact/config'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def valid_payload():
    return {
        'name': 'Priya Sharma',
        'email': 'priya@example.com',
        'phone': '98765 43210',
        'countryCode': '+91',
        'company': 'Acme Labs',
        'subject': 'Website redesign',
        'serviceInterest': 'web-development',
        'budgetRange': '5k-15k',
        'message': 'We would like a quote for redesigning our marketing site.',
        'captchaToken': 'no-captcha-available',
    }


@pytest.fixture
def recaptcha_secret(settings):
    settings.RECAPTCHA_SECRET_KEY = 'test-secret'
    return settings


def siteverify_response(body, status_code=200):
    response = Mock(status_code=status_code, text=str(body))
    response.json.return_value = body
    return response


class TestContactFormSubmission:
    """Test public contact form submission."""

    def test_submit_valid_contact_form(self, api_client, valid_payload):
        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['success'] is True
        assert response.data['message'] == "Thank you! We will get back to you soon."

        submission = ContactSubmission.objects.get()
        assert response.data['contactId'] == str(submission.id)
        assert submission.phone == '9876543210'
        assert submission.country_code == '+91'
        assert submission.service_interest == 'web-development'
        assert submission.captcha_score is None
        assert submission.ip_address == '127.0.0.1'

    def test_user_agent_is_stored(self, api_client, valid_payload):
        api_client.post(
            SUBMIT_URL, valid_payload, format='json',
            HTTP_USER_AGENT='Mozilla/5.0 (X11; Linux x86_64)'
        )

        assert ContactSubmission.objects.get().user_agent == 'Mozilla/5.0 (X11; Linux x86_64)'

    def test_forwarded_ip_is_stored(self, api_client, valid_payload):
        api_client.post(
            SUBMIT_URL, valid_payload, format='json',
            HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1'
        )

        assert ContactSubmission.objects.get().ip_address == '203.0.113.7'

    def test_optional_fields_may_be_omitted(self, api_client, valid_payload):
        for field in ('company', 'serviceInterest', 'budgetRange', 'captchaToken'):
            valid_payload.pop(field)

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        submission = ContactSubmission.objects.get()
        assert submission.company == ''
        assert submission.budget_range == ''

    def test_fields_are_sanitized(self, api_client, valid_payload):
        valid_payload.update({
            'name': '  <b>Priya</b>   Sharma ',
            'email': 'Priya@Example.COM',
            'subject': '<i>Website</i> redesign',
            'message': '<script>alert(1)</script> Please send over a quote for the redesign.  ',
        })

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        submission = ContactSubmission.objects.get()
        assert submission.name == 'Priya Sharma'
        assert submission.email == 'priya@example.com'
        assert submission.subject == 'Website redesign'
        assert submission.message == 'alert(1) Please send over a quote for the redesign.'

    @pytest.mark.parametrize('method', ['get', 'put', 'patch', 'delete'])
    def test_other_methods_not_allowed(self, api_client, method):
        response = getattr(api_client, method)(SUBMIT_URL)

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.data == {'success': False, 'message': 'Method not allowed'}
        assert 'POST' in response['Allow']
        assert ContactSubmission.objects.count() == 0

    def test_malformed_json(self, api_client):
        response = api_client.post(SUBMIT_URL, data='{"name": ', content_type='application/json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'success': False, 'message': 'Invalid request body.'}


class TestValidation:
    """Test schema validation and the field error map."""

    def test_submit_missing_required_fields(self, api_client):
        response = api_client.post(SUBMIT_URL, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False
        assert response.data['message'] == 'Please correct the highlighted fields.'
        assert set(response.data['errors']) == {
            'name', 'email', 'phone', 'countryCode', 'subject', 'message'
        }
        assert ContactSubmission.objects.count() == 0

    def test_errors_cover_only_invalid_fields(self, api_client, valid_payload):
        del valid_payload['email']
        valid_payload['message'] = 'Too short'

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {
            'email': 'Email is required',
            'message': 'Message must be at least 20 characters',
        }

    def test_phone_with_wrong_digit_count_for_country(self, api_client, valid_payload):
        valid_payload['phone'] = '98765'

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {
            'phone': 'Please enter a valid 10-digit phone number for India'
        }

    def test_phone_length_follows_selected_country(self, api_client, valid_payload):
        valid_payload.update({'phone': '9123 4567', 'countryCode': '+65'})

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert ContactSubmission.objects.get().phone == '91234567'

    def test_phone_error_reported_alongside_other_errors(self, api_client, valid_payload):
        valid_payload.update({'phone': '123', 'name': 'A'})

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert set(response.data['errors']) == {'name', 'phone'}

    def test_unknown_country_code(self, api_client, valid_payload):
        valid_payload['countryCode'] = '+999'

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {'countryCode': 'Please select a valid country code'}

    @pytest.mark.parametrize('country_code', [' +91', '+91 ', '\t+91\n'])
    def test_padded_country_code_is_trimmed_and_stored(self, api_client, valid_payload, country_code):
        valid_payload['countryCode'] = country_code

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert ContactSubmission.objects.get().country_code == '+91'

    @pytest.mark.parametrize('phone', ['123', '1' * 25])
    def test_padded_country_code_still_enforces_phone_length(self, api_client, valid_payload, phone):
        valid_payload.update({'countryCode': ' +91 ', 'phone': phone})

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {
            'phone': 'Please enter a valid 10-digit phone number for India'
        }
        assert ContactSubmission.objects.count() == 0

    def test_numeric_country_code(self, api_client, valid_payload):
        valid_payload['countryCode'] = 91

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {'countryCode': 'Please select a valid country code'}
        assert ContactSubmission.objects.count() == 0

    def test_country_code_that_is_not_a_string(self, api_client, valid_payload):
        valid_payload['countryCode'] = ['+91']

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert set(response.data['errors']) == {'countryCode'}
        assert ContactSubmission.objects.count() == 0

    @pytest.mark.parametrize('phone', ['²' * 10, '٩٨٧٦٥٤٣٢١٠', '９８７６５４３２１０'])
    def test_non_ascii_digits_rejected(self, api_client, valid_payload, phone):
        valid_payload['phone'] = phone

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {
            'phone': 'Please enter a valid 10-digit phone number for India'
        }
        assert ContactSubmission.objects.count() == 0

    def test_non_ascii_digits_with_unknown_country(self, api_client, valid_payload):
        valid_payload.update({'countryCode': '+999', 'phone': '²' * 10})

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.data['errors'] == {
            'countryCode': 'Please select a valid country code',
            'phone': 'Phone number must contain digits only',
        }

    def test_invalid_email(self, api_client, valid_payload):
        valid_payload['email'] = 'invalid-email'

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {'email': 'Please enter a valid email address'}

    def test_disposable_email_rejected(self, api_client, valid_payload):
        valid_payload['email'] = 'someone@mailinator.com'

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data['errors']

    def test_name_that_is_only_markup(self, api_client, valid_payload):
        valid_payload['name'] = '<b></b>'

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {'name': 'Name must be at least 2 characters'}

    def test_unknown_service_interest(self, api_client, valid_payload):
        valid_payload['serviceInterest'] = 'crypto-mining'

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {'serviceInterest': 'Please select a valid service'}

    def test_honeypot_spam_detection(self, api_client, valid_payload):
        valid_payload['website'] = 'http://spam.example'

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors'] == {'website': 'Spam detected'}


class TestBotVerification:
    """Test reCAPTCHA handling inside the submission pipeline."""

    def test_sentinel_token_without_secret_succeeds(self, api_client, valid_payload):
        with patch('core.recaptcha_service.requests.post') as mock_post:
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        mock_post.assert_not_called()

    def test_low_score_rejected(self, api_client, valid_payload, recaptcha_secret):
        valid_payload['captchaToken'] = 'real-token'

        with patch('core.recaptcha_service.requests.post') as mock_post:
            mock_post.return_value = siteverify_response({'success': True, 'score': 0.4})
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'success': False, 'message': 'CAPTCHA verification failed.'}
        assert ContactSubmission.objects.count() == 0

    def test_passing_score_stored(self, api_client, valid_payload, recaptcha_secret):
        valid_payload['captchaToken'] = 'real-token'

        with patch('core.recaptcha_service.requests.post') as mock_post:
            mock_post.return_value = siteverify_response({'success': True, 'score': 0.6})
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert ContactSubmission.objects.get().captcha_score == 0.6
        assert mock_post.call_args.kwargs['data']['remoteip'] == '127.0.0.1'

    def test_verification_runs_before_validation(self, api_client, recaptcha_secret):
        with patch('core.recaptcha_service.requests.post') as mock_post:
            mock_post.return_value = siteverify_response({'success': False})
            response = api_client.post(SUBMIT_URL, {'captchaToken': 'real-token'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'errors' not in response.data


class TestFailureHandling:
    """Test server-side failures map to stable responses."""

    def test_persistence_failure(self, api_client, valid_payload):
        with patch.object(ContactSubmission.objects, 'create', side_effect=DatabaseError('db down')):
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'success': False, 'message': 'Unexpected error. Please try again.'}

    def test_unexpected_failure(self, api_client, valid_payload):
        with patch('contact.views.recaptcha_service.verify_token', side_effect=RuntimeError('boom')):
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['success'] is False


class TestEmails:
    """Test notification and confirmation emails."""

    def test_submission_sends_both_emails(self, api_client, valid_payload, mailoutbox):
        api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert len(mailoutbox) == 2
        staff, confirmation = sorted(mailoutbox, key=lambda m: m.to[0] != 'support@example.com')
        submission = ContactSubmission.objects.get()

        assert staff.to == ['support@example.com']
        assert staff.reply_to == ['priya@example.com']
        assert staff.subject == 'New Contact Form Submission - Website redesign'
        assert submission.reference in staff.body
        assert 'Web Development' in staff.body

        assert confirmation.to == ['priya@example.com']
        assert submission.reference in confirmation.body
        assert confirmation.alternatives[0][1] == 'text/html'

    def test_queue_failure_does_not_fail_request(self, api_client, valid_payload, mailoutbox):
        with patch('contact.views.send_staff_notification') as mock_task:
            mock_task.delay.side_effect = ConnectionError('broker unavailable')
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert ContactSubmission.objects.count() == 1
        # The confirmation is still sent
        assert [m.to for m in mailoutbox] == [['priya@example.com']]

    def test_smtp_failure_does_not_fail_request(self, api_client, valid_payload):
        with patch(
            'contact.tasks.EmailMultiAlternatives.send',
            side_effect=smtplib.SMTPException('relay refused')
        ):
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert ContactSubmission.objects.count() == 1


class TestRateLimiting:
    """Test rate limiting for contact form."""

    def test_fourth_request_in_window_rejected(self, api_client, valid_payload):
        for _ in range(3):
            response = api_client.post(SUBMIT_URL, valid_payload, format='json')
            assert response.status_code == status.HTTP_201_CREATED

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.data == {
            'success': False,
            'message': 'Too many requests. Please wait a minute.',
        }
        assert int(response['Retry-After']) >= 1
        assert ContactSubmission.objects.count() == 3

    def test_rejected_submissions_count_towards_limit(self, api_client, valid_payload):
        for _ in range(3):
            api_client.post(SUBMIT_URL, {}, format='json')

        response = api_client.post(SUBMIT_URL, valid_payload, format='json')

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def test_limit_resets_after_window(self, api_client, valid_payload, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr(contact_rate_limiter, 'clock', lambda: now[0])

        for _ in range(3):
            api_client.post(SUBMIT_URL, valid_payload, format='json')

        now[0] += 30
        response = api_client.post(SUBMIT_URL, valid_payload, format='json')
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

        now[0] += 31
        response = api_client.post(SUBMIT_URL, valid_payload, format='json')
        assert response.status_code == status.HTTP_201_CREATED

    def test_limit_is_per_ip(self, api_client, valid_payload):
        for _ in range(3):
            api_client.post(SUBMIT_URL, valid_payload, format='json', HTTP_X_FORWARDED_FOR='198.51.100.1')

        blocked = api_client.post(SUBMIT_URL, valid_payload, format='json', HTTP_X_FORWARDED_FOR='198.51.100.1')
        other = api_client.post(SUBMIT_URL, valid_payload, format='json', HTTP_X_FORWARDED_FOR='198.51.100.2')

        assert blocked.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert other.status_code == status.HTTP_201_CREATED


class TestContactFormConfig:
    """Test the public form configuration endpoint."""

    def test_config_without_site_key(self, api_client):
        response = api_client.get(CONFIG_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['captchaEnabled'] is False
        assert response.data['defaultCountryCode'] == '+91'
        india = next(c for c in response.data['countryCodes'] if c['code'] == '+91')
        assert india == {'code': '+91', 'country': 'India', 'minLength': 10, 'maxLength': 10}

    def test_config_with_site_key(self, api_client, settings):
        settings.RECAPTCHA_SITE_KEY = 'public-site-key'

        response = api_client.get(CONFIG_URL)

        assert response.data['siteKey'] == 'public-site-key'
        assert response.data['captchaEnabled'] is True


class TestContactSubmissionModel:
    """Test contact model methods."""

    @pytest.fixture
    def submission(self):
        return ContactSubmission.objects.create(
            name='John Doe',
            email='john@example.com',
            phone='2025550143',
            country_code='+1',
            subject='Partnership',
            message='This is a test message about a possible partnership.',
            ip_address='192.168.1.1',
            user_agent='x' * 800
        )

    def test_reference_generation(self, submission):
        assert submission.reference.startswith('CNT-')
        assert len(submission.reference) == 12

    def test_user_agent_truncated(self, submission):
        assert len(submission.user_agent) == 500

    def test_submission_is_immutable(self, submission):
        submission.subject = 'Changed'

        with pytest.raises(ValueError):
            submission.save()

        submission.refresh_from_db()
        assert submission.subject == 'Partnership'
