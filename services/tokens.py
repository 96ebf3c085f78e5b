from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import jwt


class TokenError(Exception):
    pass


def create_access_token(teacher, config: Mapping) -> str:
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(teacher.id),
        "name": teacher.name,
        "role": teacher.role.name,
        "school_id": teacher.school_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=int(config["JWT_EXP_MINUTES"]))).timestamp()),
    }
    return jwt.encode(payload, config["JWT_SECRET"], algorithm=config["JWT_ALGORITHM"])


def decode_access_token(token: str, config: Mapping) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, config["JWT_SECRET"], algorithms=[config["JWT_ALGORITHM"]])
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Token expirado.") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError("Token inválido.") from exc

    if "sub" not in payload:
        raise TokenError("Token inválido.")
    return payload
