import pytest


@pytest.fixture(autouse=True)
def reset_contact_rate_limiter():
    """The limiter is process-wide; start every test with empty counters."""
    from contact.rate_limiting import contact_rate_limiter

    contact_rate_limiter.reset()
    yield
    contact_rate_limiter.reset()
