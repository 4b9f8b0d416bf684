"""Shared pytest fixtures for admin_forms tests."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from admin_forms import (
    AssociationInfo,
    Cardinality,
    FieldSpec,
    ModelSchema,
    ModelSpec,
    RenderContext,
)
from admin_forms.runtime.template_renderer import JinjaTheme

TODAY = date(2024, 6, 15)


def contact_schema() -> ModelSchema:
    """Contacts with a category, phone numbers and groups."""
    return ModelSchema(
        [
            ModelSpec(
                name="contact",
                fields=[
                    FieldSpec(name="id", type="id"),
                    FieldSpec(name="first_name"),
                    FieldSpec(name="last_name"),
                    FieldSpec(name="email"),
                    FieldSpec(name="bio", type="text"),
                    FieldSpec(name="active", type="boolean"),
                    FieldSpec(name="birthday", type="date"),
                    FieldSpec(name="last_call", type="datetime"),
                    FieldSpec(name="call_at", type="time"),
                    FieldSpec(name="avatar", type="AvatarFile"),
                    FieldSpec(name="color", type="integer"),
                    FieldSpec(name="category_id", type="integer"),
                    FieldSpec(name="inserted_at", type="datetime"),
                    FieldSpec(name="updated_at", type="datetime"),
                ],
                associations=[
                    AssociationInfo(
                        name="category",
                        cardinality=Cardinality.ONE,
                        owner_key="category_id",
                        related_model="category",
                    ),
                    AssociationInfo(
                        name="phone_numbers",
                        cardinality=Cardinality.MANY,
                        owner_key="id",
                        related_model="phone_number",
                    ),
                    AssociationInfo(
                        name="groups",
                        cardinality=Cardinality.MANY,
                        owner_key="id",
                        related_model="group",
                        through=("contacts_groups", "group"),
                    ),
                ],
            ),
            ModelSpec(
                name="phone_number",
                fields=[
                    FieldSpec(name="id", type="id"),
                    FieldSpec(name="label"),
                    FieldSpec(name="number"),
                ],
            ),
            ModelSpec(
                name="category",
                fields=[FieldSpec(name="id", type="id"), FieldSpec(name="name")],
            ),
            ModelSpec(
                name="group",
                fields=[FieldSpec(name="id", type="id"), FieldSpec(name="name")],
            ),
        ]
    )


def contact_record(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": 7,
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "bio": "Analyst",
        "active": True,
        "birthday": date(1990, 12, 10),
        "last_call": None,
        "call_at": None,
        "avatar": None,
        "color": 2,
        "category_id": 2,
        "phone_numbers": [
            {"id": 11, "label": "home", "number": "555-0100"},
            {"id": 12, "label": "work", "number": "555-0199"},
        ],
        "groups": [{"id": 1, "name": "Friends"}],
    }
    record.update(overrides)
    return record


CATEGORIES = [{"id": 1, "name": "Business"}, {"id": 2, "name": "Personal"}]
GROUPS = [{"id": 1, "name": "Friends"}, {"id": 2, "name": "Family"}]


@pytest.fixture
def schema() -> ModelSchema:
    return contact_schema()


@pytest.fixture
def record() -> dict[str, Any]:
    return contact_record()


@pytest.fixture
def theme() -> JinjaTheme:
    return JinjaTheme()


@pytest.fixture
def context(record: dict[str, Any]) -> RenderContext:
    return RenderContext(record=record, model_name="contact", today=TODAY)
