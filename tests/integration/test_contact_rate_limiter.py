"""
Tests for the in-process contact form rate limiter.

Run with: pytest tests/integration/test_contact_rate_limiter.py -v
"""
import pytest
from django.test import RequestFactory

from contact.rate_limiting import ContactRateLimiter, get_client_ip, get_rate_limit_key


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock(start=500.0)


@pytest.fixture
def limiter(clock):
    return ContactRateLimiter(window_seconds=60, max_requests=3, clock=clock)


class TestContactRateLimiter:

    def test_three_allowed_then_denied(self, limiter):
        key = 'contact_form:10.0.0.1'

        assert [limiter.is_allowed(key) for _ in range(4)] == [True, True, True, False]

    def test_retry_after_counts_down_to_window_end(self, limiter, clock):
        key = 'contact_form:10.0.0.1'
        for _ in range(3):
            limiter.check(key)

        clock.advance(20)
        allowed, retry_after = limiter.check(key)

        assert allowed is False
        assert retry_after == 40

    def test_window_boundary_is_exclusive(self, limiter, clock):
        key = 'contact_form:10.0.0.1'
        for _ in range(3):
            limiter.check(key)

        clock.advance(60)
        assert limiter.is_allowed(key) is False

        clock.advance(0.001)
        assert limiter.is_allowed(key) is True

    def test_new_window_starts_with_count_of_one(self, limiter, clock):
        key = 'contact_form:10.0.0.1'
        for _ in range(3):
            limiter.check(key)

        clock.advance(61)

        assert [limiter.is_allowed(key) for _ in range(4)] == [True, True, True, False]

    def test_keys_are_independent(self, limiter):
        for _ in range(3):
            limiter.check('contact_form:10.0.0.1')

        assert limiter.is_allowed('contact_form:10.0.0.1') is False
        assert limiter.is_allowed('contact_form:10.0.0.2') is True

    def test_reset(self, limiter):
        for _ in range(4):
            limiter.check('contact_form:10.0.0.1')

        limiter.reset()

        assert limiter.is_allowed('contact_form:10.0.0.1') is True

    def test_limits_default_to_settings(self, settings):
        settings.CONTACT_FORM_RATE_LIMIT_WINDOW_SECONDS = 10
        settings.CONTACT_FORM_RATE_LIMIT_MAX_REQUESTS = 1

        limiter = ContactRateLimiter(clock=lambda: 0.0)

        assert limiter.window_seconds == 10
        assert [limiter.is_allowed('k') for _ in range(2)] == [True, False]


class TestClientIp:

    @pytest.fixture
    def factory(self):
        return RequestFactory()

    def test_first_forwarded_address(self, factory):
        request = factory.post('/', HTTP_X_FORWARDED_FOR='203.0.113.5, 10.0.0.1')

        assert get_client_ip(request) == '203.0.113.5'

    def test_real_ip_header(self, factory):
        request = factory.post('/', HTTP_X_REAL_IP='203.0.113.6')

        assert get_client_ip(request) == '203.0.113.6'

    def test_remote_addr_fallback(self, factory):
        request = factory.post('/', REMOTE_ADDR='192.0.2.10')

        assert get_client_ip(request) == '192.0.2.10'

    def test_unknown_when_nothing_available(self, factory):
        request = factory.post('/')
        request.META.pop('REMOTE_ADDR', None)

        assert get_client_ip(request) == 'unknown'

    def test_rate_limit_key(self, factory):
        request = factory.post('/', REMOTE_ADDR='192.0.2.10')

        assert get_rate_limit_key(request) == 'contact_form:192.0.2.10'
