# apps/members/services/auth.py
# ------------------------------------------------------------------------------
# Emisión de JWT (simplejwt) y login con ID token de Firebase (PyJWT + JWKS).
# ------------------------------------------------------------------------------
import logging

import jwt
from jwt import PyJWKClient
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework_simplejwt.tokens import RefreshToken

from apps.common.exceptions import ServerError

logger = logging.getLogger(__name__)
Member = get_user_model()

_jwks_client = None


def token_payload(member):
    return {
        "id": member.id,
        "email": member.email,
        "name": member.name,
        "role": member.role,
        "avatar": member.avatar,
    }


def issue_tokens(member):
    """
    Access + refresh para el socio, con claims de perfil en el access.

    Retorna:
      - {"token": str, "refresh": str, "user": dict}
    """
    refresh = RefreshToken.for_user(member)
    access = refresh.access_token
    access["email"] = member.email
    access["name"] = member.name
    access["role"] = member.role
    logger.info("[auth.tokens] emitidos member_id=%s role=%s", member.id, member.role)
    return {"token": str(access), "refresh": str(refresh), "user": token_payload(member)}


def authenticate_member(email, password):
    """Valida credenciales; errores como issues por campo (400)."""
    member = Member.objects.filter(email__iexact=email.strip()).first()
    if member is None:
        raise ValidationError({"email": ["Account not found."]})
    if not member.check_password(password):
        logger.info("[auth.login][fail] password incorrecto member_id=%s", member.id)
        raise ValidationError({"password": ["Incorrect password."]})
    if not member.is_active:
        raise AuthenticationFailed("Account is disabled.")
    return member


def _get_jwks_client():
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = PyJWKClient(settings.FIREBASE_JWKS_URL)
    return _jwks_client


def verify_firebase_token(id_token):
    """
    Verifica firma (RS256 con JWKS de Google), audiencia e issuer del ID token.

    Retorna:
      - dict con los claims (sub, email, name, picture, ...).
    """
    project_id = settings.FIREBASE_PROJECT_ID
    if not project_id:
        logger.error("[auth.firebase] FIREBASE_PROJECT_ID no configurado")
        raise ServerError("Firebase login is not configured.")

    try:
        signing_key = _get_jwks_client().get_signing_key_from_jwt(id_token)
        return jwt.decode(
            id_token,
            signing_key.key,
            algorithms=["RS256"],
            audience=project_id,
            issuer=f"https://securetoken.google.com/{project_id}",
        )
    except (jwt.InvalidTokenError, jwt.PyJWKClientError) as e:
        logger.warning("[auth.firebase][invalid] %s", e)
        raise AuthenticationFailed("Invalid Firebase token.")


def member_from_firebase_claims(claims):
    """
    Busca por firebase_uid, luego por email (vincula), y si no existe lo crea.
    """
    uid = claims.get("sub") or claims.get("user_id")
    email = (claims.get("email") or "").strip().lower()
    if not uid or not email:
        raise ValidationError({"idToken": ["Token has no uid or email."]})

    with transaction.atomic():
        member = Member.objects.select_for_update().filter(firebase_uid=uid).first()
        if member:
            return member

        member = Member.objects.select_for_update().filter(email__iexact=email).first()
        if member:
            member.firebase_uid = uid
            if not member.avatar and claims.get("picture"):
                member.avatar = claims["picture"]
            member.save(update_fields=["firebase_uid", "avatar"])
            logger.info("[auth.firebase] vinculado member_id=%s", member.id)
            return member

        member = Member.objects.create_user(
            email=email,
            password=None,
            account=email.split("@", 1)[0],
            name=claims.get("name") or email.split("@", 1)[0],
            avatar=claims.get("picture") or "",
            firebase_uid=uid,
        )
        logger.info("[auth.firebase] creado member_id=%s", member.id)
        return member
