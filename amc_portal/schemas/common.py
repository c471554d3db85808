# amc_portal/schemas/common.py
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from amc_portal.utils.datetime import isoformat_utc, to_naive_utc


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python, readable from ORM rows"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# timestamps leave the API as ISO-8601 with an explicit UTC offset
UTCDateTime = Annotated[
    datetime,
    PlainSerializer(isoformat_utc, return_type=str, when_used="json"),
]

# incoming timestamps are stored as naive UTC
InputDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]
