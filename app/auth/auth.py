"""JWT token authentication using Azure AD / OpenID Connect.

This module provides authentication via Bearer tokens validated against
Azure AD's OIDC configuration. The token_required dependency should be
used on all protected endpoints.
"""

from datetime import datetime
from typing import Annotated

import jwt
import pytz
import requests
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import settings
from models.enums import ActorRole
from repositories.employee_repository import EmployeeRecord, EmployeeRepository

ALIAS_ROLES = (ActorRole.ADMIN, ActorRole.CEO)


def get_openid_config() -> dict:
    """Fetch OpenID Connect configuration from the identity provider.

    Returns:
        dict: The OpenID configuration containing endpoints and settings.

    Raises:
        HTTPException: If the configuration cannot be fetched.
    """
    if not settings.openid_config_url:
        raise HTTPException(status_code=500, detail="OIDC configuration URL not set")
    resp = requests.get(settings.openid_config_url, timeout=10)
    if resp.status_code != 200:
        raise HTTPException(status_code=500, detail="Failed to fetch OpenID config")
    return resp.json()


def get_signing_key(kid: str, jwks: dict):
    """Extract the signing key matching the key ID from JWKS.

    Args:
        kid: Key ID from the JWT header.
        jwks: JSON Web Key Set from the identity provider.

    Returns:
        The RSA public key for signature verification, or None if not found.
    """
    keys = jwks.get("keys", [])
    for key in keys:
        if key.get("kid") == kid:
            return jwt.algorithms.RSAAlgorithm.from_jwk(key)
    return None


def get_active_employee_by_email(db: Session, email: str) -> EmployeeRecord | None:
    """Look up an active employee by email address.

    Args:
        db: Database session.
        email: Email address to search for (case-insensitive).

    Returns:
        EmployeeRecord if found and active, None otherwise.
    """
    employee = EmployeeRepository(db).find_by_email(email)
    if employee is None or not employee.is_active:
        return None
    return employee


def resolve_role(decoded_token: dict, employee: EmployeeRecord) -> ActorRole:
    """Pick the acting role for a validated token.

    An ``admin`` or ``ceo`` entry in the roles claim wins; otherwise the
    employee acts at its own level.
    """
    claimed = decoded_token.get(settings.admin_roles_claim) or []
    if isinstance(claimed, str):
        claimed = [claimed]
    for alias in ALIAS_ROLES:
        if alias.value in claimed:
            return alias
    return ActorRole(employee.level.value)


def validate_token(token: str, db: Session) -> dict:
    """Validate a JWT token against Azure AD.

    Args:
        token: The JWT token string to validate.
        db: Database session for employee lookup.

    Returns:
        dict containing user_id, email, role, and decoded token.

    Raises:
        HTTPException: For various authentication failures.
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication Token is missing!",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        openid_config = get_openid_config()
        jwks_uri = openid_config.get("jwks_uri")
        if not jwks_uri:
            raise HTTPException(status_code=500, detail="JWKS URI missing in OIDC config")
        jwks = requests.get(jwks_uri, timeout=10).json()

        unverified_header = jwt.get_unverified_header(token)
        kid = unverified_header.get("kid")
        if not kid:
            raise HTTPException(status_code=401, detail="Invalid token: Missing Key ID (kid)")

        signing_key = get_signing_key(kid, jwks)
        if not signing_key:
            raise HTTPException(status_code=401, detail="Invalid token: Key not found in JWKS")

        decoded_token = jwt.decode(
            token,
            signing_key,
            algorithms=["RS256"],
            audience=settings.valid_audience,
            issuer=settings.valid_issuer,
        )

        app_id = decoded_token.get("appid")
        tid = decoded_token.get("tid")

        if (settings.client_id and app_id != settings.client_id) or (
            settings.tenant_id and tid != settings.tenant_id
        ):
            raise HTTPException(status_code=401, detail="Invalid token: Unauthorized app or tenant")

        exp_time = datetime.fromtimestamp(decoded_token["exp"], pytz.timezone(settings.timezone))
        current_time = datetime.now(pytz.timezone(settings.timezone))
        if current_time > exp_time:
            raise HTTPException(status_code=401, detail="Authentication Token Has Expired!")

        unique_name = decoded_token.get("unique_name")
        if not unique_name:
            raise HTTPException(status_code=401, detail="Invalid Token: unique_name missing")

        current_user = get_active_employee_by_email(db, unique_name)
        if current_user is None:
            raise HTTPException(status_code=401, detail="Invalid Token")

        return {
            "user_id": current_user.id,
            "email": current_user.email,
            "role": resolve_role(decoded_token, current_user).value,
            "token": decoded_token,
        }
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(status_code=401, detail="Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=f"Token validation failed: {str(e)}") from e
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Authentication error: {str(e)}") from e


def token_required(
    authorization: Annotated[str | None, Header()] = None,
    db: Annotated[Session, Depends(get_db)] = None,
) -> dict:
    """FastAPI dependency for requiring valid authentication.

    This dependency should be added to all protected endpoints.
    It validates the Bearer token and returns user information.

    Args:
        authorization: The Authorization header value.
        db: Database session (injected).

    Returns:
        dict containing user_id, email, role, and decoded token.

    Raises:
        HTTPException: If authentication fails.
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing or malformed",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization.split(" ", 1)[1].strip()
    return validate_token(token, db)
