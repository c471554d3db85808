# amc_portal/utils/responses.py
from typing import Any, Optional, Sequence, Type

from fastapi import Request
from pydantic import BaseModel


def dump(model: Type[BaseModel], obj: Any) -> Any:
    """Validate ORM rows (or a list of them) through ``model`` and dump camelCase JSON"""
    if isinstance(obj, (list, tuple)):
        return [dump(model, item) for item in obj]
    return model.model_validate(obj, from_attributes=True).model_dump(by_alias=True, mode="json")


def success(data: Any = None, message: Optional[str] = None, **extra) -> dict:
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body


def client_info(request: Optional[Request]) -> dict:
    """IP address and user agent of the caller, for activity entries"""
    if request is None:
        return {"ip_address": None, "user_agent": None}

    forwarded: Sequence[str] = request.headers.get("x-forwarded-for", "").split(",")
    ip_address = forwarded[0].strip() or (request.client.host if request.client else None)
    return {"ip_address": ip_address, "user_agent": request.headers.get("user-agent")}
