# apps/common/authentication.py

import logging

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken

logger = logging.getLogger(__name__)


class OptionalJWTAuthentication(JWTAuthentication):
    """
    JWT opcional para endpoints públicos: si el token falta o es inválido
    se sigue como anónimo en vez de responder 401.
    """

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except (InvalidToken, AuthenticationFailed) as e:
            logger.debug("[auth.optional] token ignorado: %s", e)
            return None
