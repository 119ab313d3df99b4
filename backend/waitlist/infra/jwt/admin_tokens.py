"""Issuance of administrator access tokens via Flask-JWT-Extended."""

from __future__ import annotations

from datetime import timedelta
from typing import cast

from flask_jwt_extended import create_access_token

ADMIN_SCOPE = "admin"


def issue_admin_token(identity: str, *, hours: float = 12.0) -> str:
    """
    Create an access token carrying the ``admin`` scope.

    .. note::
       Requires an active Flask app context with ``JWT_SECRET_KEY`` set.

    :param identity: Operator name recorded as the token subject.
    :param hours: Token lifetime.
    :returns: Encoded JWT.
    """
    if hours <= 0:
        raise ValueError("Token lifetime must be positive.")
    return cast(
        str,
        create_access_token(
            identity=identity,
            additional_claims={"scopes": [ADMIN_SCOPE]},
            expires_delta=timedelta(hours=hours),
        ),
    )
