"""Member routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from gold_ledger.db import get_session
from gold_ledger.schemas.user import UserCreateSchema, UserSchema
from gold_ledger.services.user_service import UserService
from gold_ledger.utils.responses import ok

users_bp = Blueprint("users", __name__)

_user_schema = UserSchema()
_create_schema = UserCreateSchema()
_service = UserService()


@users_bp.post("/users")
def create_user():
    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)

    user = _service.create_user(
        get_session(),
        name=str(data["name"]).strip(),
        member_id=str(data["member_id"]).strip(),
        phone_number=data.get("phone_number"),
    )
    return ok(_user_schema.dump(user), "User created successfully", 201)


@users_bp.get("/users/<id:user_id>")
def get_user(user_id: int):
    user = _service.get_user(get_session(), user_id)
    return ok(_user_schema.dump(user), "User fetched successfully")
