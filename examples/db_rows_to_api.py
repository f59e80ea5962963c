"""Map database-style rows with nullable columns onto API response models."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from record_mapper import create_default_registry, map_slice, to_named_args
from record_mapper.nulls import NullInt64, NullString, NullTime, null_string, null_time

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class UserRow:
    """Row shape produced by the data-access layer."""

    id: int
    user_name: str = field(metadata={"db": "username"})
    email: NullString = field(default_factory=NullString)
    last_login: NullTime = field(default_factory=NullTime)
    karma: NullInt64 = field(default_factory=NullInt64)
    password_hash: str = ""


class UserResponse(BaseModel):
    """Response model exposed by the HTTP layer."""

    ID: int
    User_Name: str
    Email: str = ""
    Last_Login: str = ""
    Karma: int = 0


def format_login(value: NullTime, dest_type: Any) -> str:
    """Render a nullable login time as text; NULL becomes ``""``."""
    del dest_type
    if not value.valid:
        return ""
    return value.time.strftime(TIME_FORMAT)


def main() -> None:
    """Run the example."""
    logging.basicConfig(level=logging.DEBUG)

    registry = create_default_registry()
    registry.register(NullTime, str, format_login)
    registry.freeze()

    rows = [
        UserRow(
            id=1,
            user_name="ann",
            email=null_string("ann@example.com"),
            last_login=null_time(datetime(2024, 5, 17, 9, 30)),
            karma=NullInt64(int64=12, valid=True),
        ),
        None,
        UserRow(id=2, user_name="bob"),
    ]

    for response in map_slice(rows, UserResponse, registry=registry):
        print(response.model_dump_json())

    print(to_named_args(rows[0]))


if __name__ == "__main__":
    main()
