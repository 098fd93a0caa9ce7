"""
Centralized test suite for the contact form service.

Test Organization:
- integration/ - reCAPTCHA verification, rate limiter and form client tests
- App-specific tests remain in their respective app directories (e.g., contact/tests.py)
"""
