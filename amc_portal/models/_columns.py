# amc_portal/models/_columns.py
import uuid

from sqlalchemy import Enum


def new_id() -> str:
    return str(uuid.uuid4())


def enum_column(enum_cls, name: str) -> Enum:
    """Store the enum's value (e.g. "in-progress"), not its member name"""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        validate_strings=True,
        values_callable=lambda members: [member.value for member in members],
    )
