"""Authentication against the upstream identity provider.

The identity provider (or the gateway in front of this service) verifies
the user and forwards their id and email in request headers. This class
only trusts those headers; it never verifies credentials itself.
"""

from dataclasses import dataclass

from django.conf import settings
from rest_framework.authentication import BaseAuthentication


def _meta_key(header: str) -> str:
    return "HTTP_" + header.upper().replace("-", "_")


@dataclass(frozen=True)
class Actor:
    """The verified user a request acts on behalf of."""

    id: str
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.id


class TrustedHeaderAuthentication(BaseAuthentication):
    def authenticate(self, request):
        user_id = request.META.get(_meta_key(settings.DRIVES["ACTOR_HEADER"]), "").strip()
        if not user_id:
            return None
        email = request.META.get(_meta_key(settings.DRIVES["ACTOR_EMAIL_HEADER"])) or None
        return Actor(id=user_id, email=email), None

    def authenticate_header(self, request) -> str:
        return settings.DRIVES["ACTOR_HEADER"]
