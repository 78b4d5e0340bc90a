"""In-memory identity provider — holds the signed-in identity and notifies subscribers.

Listeners are called synchronously on every sign-in/sign-out, in subscription order.
"""

import logging

from session_tracker.core.domain_types import Identity
from session_tracker.core.repository_protocols import IdentityListener, Unsubscribe

logger = logging.getLogger(__name__)


class InMemoryIdentityProvider:
    def __init__(self, identity: Identity | None = None):
        self._identity = identity
        self._listeners: list[IdentityListener] = []

    def get_current_identity(self) -> Identity | None:
        return self._identity

    def subscribe(self, on_change: IdentityListener) -> Unsubscribe:
        self._listeners.append(on_change)

        def unsubscribe() -> None:
            if on_change in self._listeners:
                self._listeners.remove(on_change)

        return unsubscribe

    def sign_in(self, identity: Identity) -> None:
        self._identity = identity
        logger.info("Signed in", extra={"user_id": identity.id})
        self._notify()

    def sign_out(self) -> None:
        self._identity = None
        logger.info("Signed out")
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._identity)
