"""
Google reCAPTCHA v3 Verification Service

Verifies reCAPTCHA tokens from the contact form against Google's siteverify API.
Verification is best-effort: an unconfigured secret, a placeholder token sent
by a client that could not load reCAPTCHA, or an unreachable API all let the
submission through. Only an explicit rejection (or a low score) blocks it.

Documentation: https://developers.google.com/recaptcha/docs/v3
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


# Placeholder tokens sent by the form when reCAPTCHA could not run client-side
NO_CAPTCHA_AVAILABLE = 'no-captcha-available'
CAPTCHA_FAILED = 'captcha-failed'
CAPTCHA_ERROR = 'captcha-error'

SENTINEL_TOKENS = frozenset({NO_CAPTCHA_AVAILABLE, CAPTCHA_FAILED, CAPTCHA_ERROR})


@dataclass(frozen=True)
class CaptchaVerification:
    """Outcome of a verification attempt. ``score`` is None when no score was returned."""
    success: bool
    score: Optional[float] = None


class RecaptchaService:
    """
    Service for verifying Google reCAPTCHA v3 tokens.

    Usage:
        result = recaptcha_service.verify_token(token, user_ip='192.168.1.1')
        if not result.success:
            ...
    """

    @property
    def secret_key(self) -> str:
        return getattr(settings, 'RECAPTCHA_SECRET_KEY', '') or ''

    @property
    def site_key(self) -> str:
        return getattr(settings, 'RECAPTCHA_SITE_KEY', '') or ''

    @property
    def verify_url(self) -> str:
        return getattr(
            settings,
            'RECAPTCHA_VERIFY_URL',
            'https://www.google.com/recaptcha/api/siteverify'
        )

    @property
    def score_threshold(self) -> float:
        return float(getattr(settings, 'RECAPTCHA_SCORE_THRESHOLD', 0.5))

    @property
    def timeout(self) -> int:
        return int(getattr(settings, 'RECAPTCHA_TIMEOUT_SECONDS', 10))

    @property
    def enabled(self) -> bool:
        return bool(self.secret_key)

    @staticmethod
    def is_placeholder(token: Optional[str]) -> bool:
        """True for missing tokens and the values a client sends when reCAPTCHA was unavailable."""
        return not token or token in SENTINEL_TOKENS

    def verify_token(self, token: Optional[str], user_ip: Optional[str] = None) -> CaptchaVerification:
        """
        Verify a reCAPTCHA token.

        Args:
            token: The reCAPTCHA response token from the form
            user_ip: Optional user IP address forwarded to Google

        Returns:
            CaptchaVerification with the decision and the score (if Google sent one)
        """
        if self.is_placeholder(token):
            if not self.enabled:
                logger.info("reCAPTCHA not configured, skipping verification")
            else:
                logger.info(f"reCAPTCHA unavailable on client ({token or 'no token'}), skipping verification")
            return CaptchaVerification(success=True)

        if not self.enabled:
            logger.warning("RECAPTCHA_SECRET_KEY not configured - accepting token without verification")
            return CaptchaVerification(success=True)

        payload = {
            'secret': self.secret_key,
            'response': token,
        }
        if user_ip:
            payload['remoteip'] = user_ip

        try:
            response = requests.post(
                self.verify_url,
                data=payload,
                timeout=self.timeout
            )

            if response.status_code != 200:
                logger.error(
                    f"reCAPTCHA API returned status {response.status_code}: {response.text}"
                )
                return CaptchaVerification(success=True)

            result = response.json()

        except requests.exceptions.Timeout:
            # Fail open: an outage at Google must not take the contact form down
            logger.error("reCAPTCHA verification timeout")
            return CaptchaVerification(success=True)

        except requests.exceptions.RequestException as e:
            logger.error(f"reCAPTCHA verification network error: {e}")
            return CaptchaVerification(success=True)

        except ValueError as e:
            logger.error(f"reCAPTCHA verification returned an unreadable response: {e}")
            return CaptchaVerification(success=True)

        return self._interpret(result)

    def _interpret(self, result: dict) -> CaptchaVerification:
        """Turn a siteverify response body into a decision."""
        success = bool(result.get('success'))
        score = result.get('score')

        if success and score is not None:
            try:
                score = float(score)
            except (TypeError, ValueError):
                logger.error(f"reCAPTCHA returned a non-numeric score: {score!r}")
                return CaptchaVerification(success=True)

            passed = score >= self.score_threshold
            if not passed:
                logger.warning(
                    f"reCAPTCHA score {score} below threshold {self.score_threshold}"
                )
            return CaptchaVerification(success=passed, score=score)

        if not success:
            logger.warning(f"reCAPTCHA verification failed: {result.get('error-codes', [])}")

        return CaptchaVerification(success=success)


# Singleton instance
recaptcha_service = RecaptchaService()
