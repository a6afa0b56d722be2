import time
from typing import Any, Dict
import jwt

from app.core import settings as _settings


def create_token(payload: Dict[str, Any], persona: str):
    payload = dict(payload)
    payload['token_time'] = time.time()
    payload['user_type'] = persona.lower()
    access_token = jwt.encode(payload, _settings.JWT_SECRET, algorithm="HS256")
    return dict(access_token=access_token, token_type="bearer")
