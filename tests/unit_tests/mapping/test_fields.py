"""Unit tests for field descriptors and field correspondence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

import pytest
from pydantic import BaseModel, Field

from record_mapper.errors import InvalidInputError
from record_mapper.mapping.fields import (
    FIELD_CACHE_SIZE,
    MATCH_CACHE_SIZE,
    construct_record,
    describe_fields,
    iter_field_values,
    match_fields,
    named_args,
)


@dataclass
class UserRow:
    id: int
    user_name: str = field(metadata={"db": "username"})
    Email: str = ""
    _secret: str = "hidden"
    created: str = field(default="", init=False)


@dataclass
class UserView:
    ID: int = 0
    USER_NAME: str = ""
    created: str = field(default="", init=False)


class UserModel(BaseModel):
    id: int
    display: str = Field(default="", alias="displayName")


class UserTuple(NamedTuple):
    id: int
    email: str = "none"


def test_dataclass_descriptors() -> None:
    """Describe declared fields in order with their flags."""
    descriptors = {d.name: d for d in describe_fields(UserRow)}

    assert list(descriptors) == ["id", "user_name", "Email", "_secret", "created"]
    assert descriptors["id"].annotation is int
    assert descriptors["id"].has_default is False
    assert descriptors["user_name"].db_name == "username"
    assert descriptors["Email"].folded == "email"
    assert descriptors["_secret"].public is False
    assert descriptors["_secret"].settable is False
    assert descriptors["created"].settable is False


def test_pydantic_descriptors_carry_alias() -> None:
    descriptors = {d.name: d for d in describe_fields(UserModel)}
    assert descriptors["display"].alias == "displayName"
    assert descriptors["display"].has_default is True
    assert descriptors["id"].has_default is False


def test_namedtuple_descriptors() -> None:
    descriptors = describe_fields(UserTuple)
    assert [d.name for d in descriptors] == ["id", "email"]
    assert descriptors[1].has_default is True


def test_describe_fields_rejects_non_records() -> None:
    with pytest.raises(InvalidInputError, match="not a record type"):
        describe_fields(dict)


def test_match_is_case_insensitive_and_reports_skips() -> None:
    """Match by folded name; report unmatched and unsettable fields."""
    correspondence = match_fields(UserRow, UserView)

    pairs = [(src.name, dst.name) for src, dst in correspondence.pairs]
    assert pairs == [("id", "ID"), ("user_name", "USER_NAME")]
    assert correspondence.unmatched == ("Email",)
    assert correspondence.unsettable == ("created",)


def test_match_is_cached() -> None:
    assert match_fields(UserRow, UserView) is match_fields(UserRow, UserView)


def test_iter_field_values_skips_private_fields() -> None:
    row = UserRow(id=1, user_name="ann")
    values = {d.name: value for d, value in iter_field_values(row)}
    assert values == {"id": 1, "user_name": "ann", "Email": "", "created": ""}


def test_construct_record_fills_missing_required_fields() -> None:
    assert construct_record(UserRow, {"Email": "a@b"}) == UserRow(
        id=0, user_name="", Email="a@b"
    )


def test_construct_pydantic_record_uses_alias() -> None:
    model = construct_record(UserModel, {"display": "Ann"})
    assert model.display == "Ann"
    assert model.id == 0


def test_named_args_uses_column_names() -> None:
    row = UserRow(id=5, user_name="ann", Email="a@b")
    assert named_args(row) == {
        "id": 5,
        "username": "ann",
        "Email": "a@b",
        "created": "",
    }


def test_named_args_uses_pydantic_alias() -> None:
    assert named_args(UserModel(id=1, displayName="Ann")) == {
        "id": 1,
        "displayName": "Ann",
    }


@pytest.mark.parametrize("value", [None, 5, {"id": 1}])
def test_named_args_rejects_non_records(value: object) -> None:
    with pytest.raises(InvalidInputError):
        named_args(value)


def test_descriptor_caches_are_bounded() -> None:
    assert describe_fields.cache_info().maxsize == FIELD_CACHE_SIZE
    assert match_fields.cache_info().maxsize == MATCH_CACHE_SIZE
