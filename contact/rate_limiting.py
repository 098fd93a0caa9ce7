"""
Rate Limiting Utilities for Contact Form

Prevents spam and abuse of the contact form with a fixed-window counter per
client IP. Counters live in process memory: they are lost on restart and are
not shared between worker processes, so this is best-effort protection.
"""
import logging
import math
import threading
import time
from dataclasses import dataclass
from functools import wraps

from django.conf import settings
from rest_framework.response import Response

from .exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)

RATE_LIMIT_KEY_PREFIX = 'contact_form'


def get_client_ip(request):
    """Get client IP address from request."""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
        if ip:
            return ip

    x_real_ip = request.META.get('HTTP_X_REAL_IP')
    if x_real_ip:
        return x_real_ip.strip()

    return request.META.get('REMOTE_ADDR') or 'unknown'


def get_rate_limit_key(request):
    return f"{RATE_LIMIT_KEY_PREFIX}:{get_client_ip(request)}"


@dataclass
class RateLimitEntry:
    count: int
    window_start: float


class ContactRateLimiter:
    """
    Fixed-window request counter keyed by an arbitrary identifier.

    The first request for a key, or the first one after the window has
    elapsed, starts a new window with a count of 1. Within a window requests
    are allowed until the count reaches ``max_requests``.
    """

    def __init__(self, window_seconds=None, max_requests=None, clock=time.monotonic):
        self._window_seconds = window_seconds
        self._max_requests = max_requests
        self.clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    @property
    def window_seconds(self):
        if self._window_seconds is not None:
            return self._window_seconds
        return getattr(settings, 'CONTACT_FORM_RATE_LIMIT_WINDOW_SECONDS', 60)

    @property
    def max_requests(self):
        if self._max_requests is not None:
            return self._max_requests
        return getattr(settings, 'CONTACT_FORM_RATE_LIMIT_MAX_REQUESTS', 3)

    def check(self, key):
        """
        Record a request for ``key``.

        Returns:
            tuple: (is_allowed, retry_after_seconds)
        """
        now = self.clock()
        window = self.window_seconds

        with self._lock:
            entry = self._entries.get(key)

            if entry is None or now - entry.window_start > window:
                self._entries[key] = RateLimitEntry(count=1, window_start=now)
                return True, 0

            if entry.count >= self.max_requests:
                retry_after = max(1, math.ceil(entry.window_start + window - now))
                return False, retry_after

            entry.count += 1
            return True, 0

    def is_allowed(self, key):
        allowed, _ = self.check(key)
        return allowed

    def reset(self):
        with self._lock:
            self._entries.clear()


contact_rate_limiter = ContactRateLimiter()


def rate_limit_contact_form(limiter=None):
    """
    Decorator for rate limiting contact form submissions by client IP.

    Every request reaching the view counts, whatever its outcome.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapped_view(self, request, *args, **kwargs):
            active_limiter = limiter or contact_rate_limiter
            key = get_rate_limit_key(request)

            allowed, retry_after = active_limiter.check(key)
            if not allowed:
                logger.warning(f"Contact form rate limit exceeded for {key}")
                exc = RateLimitExceeded(retry_after=retry_after)
                return Response(
                    exc.to_payload(),
                    status=exc.status_code,
                    headers={'Retry-After': str(retry_after)}
                )

            return view_func(self, request, *args, **kwargs)

        return wrapped_view
    return decorator
