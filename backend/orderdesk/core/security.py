from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from orderdesk.core.config import get_settings


security = HTTPBasic(auto_error=False)


def require_basic_auth(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    """Authenticate the request and return the username used as audit actor."""
    settings = get_settings()
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication required", headers={"WWW-Authenticate": "Basic"})

    valid_user = secrets.compare_digest(credentials.username, settings.basic_auth_username)
    valid_pass = secrets.compare_digest(credentials.password, settings.basic_auth_password)
    if not (valid_user and valid_pass):
        raise HTTPException(status_code=401, detail="Invalid credentials", headers={"WWW-Authenticate": "Basic"})
    return credentials.username


def acting_employee_id(x_employee_id: int | None = Header(default=None, alias="X-Employee-Id")) -> int | None:
    """
    Employee on whose behalf the request acts, as forwarded by the front end.

    Basic auth identifies a technical user only, so the employee id travels in
    its own header. `None` means the caller could not supply one.
    """
    if x_employee_id is not None and x_employee_id <= 0:
        raise HTTPException(status_code=422, detail="X-Employee-Id must be a positive integer")
    return x_employee_id
