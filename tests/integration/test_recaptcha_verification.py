"""
Tests for reCAPTCHA token verification.

Run with: pytest tests/integration/test_recaptcha_verification.py -v
"""
from unittest.mock import Mock, patch

import pytest
import requests

from core.recaptcha_service import (
    CAPTCHA_ERROR,
    CAPTCHA_FAILED,
    NO_CAPTCHA_AVAILABLE,
    CaptchaVerification,
    RecaptchaService,
)


@pytest.fixture
def service():
    return RecaptchaService()


@pytest.fixture
def configured(settings):
    settings.RECAPTCHA_SECRET_KEY = 'test-secret'
    settings.RECAPTCHA_SCORE_THRESHOLD = 0.5
    return settings


@pytest.fixture
def mock_post():
    with patch('core.recaptcha_service.requests.post') as mocked:
        yield mocked


def siteverify(body, status_code=200):
    response = Mock(status_code=status_code, text=str(body))
    response.json.return_value = body
    return response


class TestPlaceholderTokens:

    @pytest.mark.parametrize('token', [NO_CAPTCHA_AVAILABLE, CAPTCHA_FAILED, CAPTCHA_ERROR, '', None])
    def test_placeholder_accepted_without_network_call(self, service, configured, mock_post, token):
        assert service.verify_token(token) == CaptchaVerification(success=True)
        mock_post.assert_not_called()

    def test_missing_secret_skips_verification(self, service, settings, mock_post):
        settings.RECAPTCHA_SECRET_KEY = ''

        result = service.verify_token('real-token')

        assert result.success is True
        assert result.score is None
        mock_post.assert_not_called()


class TestScoreThreshold:

    @pytest.mark.parametrize('score, accepted', [
        (0.4, False),
        (0.5, True),
        (0.6, True),
        (0.9, True),
        (0.1, False),
    ])
    def test_score_threshold(self, service, configured, mock_post, score, accepted):
        mock_post.return_value = siteverify({'success': True, 'score': score})

        result = service.verify_token('real-token')

        assert result.success is accepted
        assert result.score == score

    def test_request_payload(self, service, configured, mock_post):
        mock_post.return_value = siteverify({'success': True, 'score': 0.9})

        service.verify_token('real-token', user_ip='203.0.113.9')

        args, kwargs = mock_post.call_args
        assert args[0] == 'https://www.google.com/recaptcha/api/siteverify'
        assert kwargs['data'] == {
            'secret': 'test-secret',
            'response': 'real-token',
            'remoteip': '203.0.113.9',
        }
        assert kwargs['timeout'] == 10

    def test_rejection_without_score(self, service, configured, mock_post):
        mock_post.return_value = siteverify({
            'success': False,
            'error-codes': ['invalid-input-response'],
        })

        assert service.verify_token('real-token') == CaptchaVerification(success=False)

    def test_success_without_score(self, service, configured, mock_post):
        mock_post.return_value = siteverify({'success': True})

        assert service.verify_token('real-token') == CaptchaVerification(success=True)


class TestFailOpen:

    def test_timeout(self, service, configured, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout()

        assert service.verify_token('real-token').success is True

    def test_connection_error(self, service, configured, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError('unreachable')

        assert service.verify_token('real-token').success is True

    def test_non_200_status(self, service, configured, mock_post):
        mock_post.return_value = siteverify({}, status_code=503)

        assert service.verify_token('real-token').success is True

    def test_unreadable_body(self, service, configured, mock_post):
        response = Mock(status_code=200, text='<html>')
        response.json.side_effect = ValueError('no json')
        mock_post.return_value = response

        result = service.verify_token('real-token')

        assert result.success is True
        assert result.score is None
