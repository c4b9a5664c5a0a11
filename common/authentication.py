"""
DRF authentication classes shared by the apps.
"""
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import SAFE_METHODS
from rest_framework_simplejwt.authentication import JWTAuthentication


class OptionalJWTAuthentication(JWTAuthentication):
    """Bearer auth for public read endpoints.

    A missing, expired or otherwise invalid token on a safe method leaves
    the request anonymous instead of failing it.  Unsafe methods keep the
    strict behaviour.
    """

    def authenticate(self, request):
        if request.method not in SAFE_METHODS:
            return super().authenticate(request)
        try:
            return super().authenticate(request)
        except AuthenticationFailed:
            return None
