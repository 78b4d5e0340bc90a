"""In-memory identity provider — current identity and change notifications."""

from session_tracker.core.domain_types import Identity
from session_tracker.infrastructure.identity import InMemoryIdentityProvider


def test_starts_signed_out_by_default():
    assert InMemoryIdentityProvider().get_current_identity() is None


def test_sign_in_and_out_notify_subscribers():
    provider = InMemoryIdentityProvider()
    seen = []
    provider.subscribe(seen.append)

    provider.sign_in(Identity(id="u1"))
    provider.sign_out()

    assert seen == [Identity(id="u1"), None]
    assert provider.get_current_identity() is None


def test_unsubscribe_stops_notifications():
    provider = InMemoryIdentityProvider()
    seen = []
    unsubscribe = provider.subscribe(seen.append)
    unsubscribe()
    unsubscribe()

    provider.sign_in(Identity(id="u1"))
    assert seen == []
