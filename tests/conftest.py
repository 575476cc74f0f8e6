"""Test fixtures for term planner tests."""

import pytest


def make_class(class_id, prerequisites=(), options=None, name=None):
    """Build a raw class record; each option is a list of (day, start, end)."""
    if options is None:
        options = [[("Lunes", "08:00", "10:00")]]
    return {
        "id": class_id,
        "name": name or f"Class {class_id}",
        "prerequisites": list(prerequisites),
        "scheduleOptions": [
            {
                "schedule": [
                    {"day": day, "startTime": start, "endTime": end}
                    for day, start, end in option
                ]
            }
            for option in options
        ],
    }


@pytest.fixture
def basic_classes():
    """Four classes with a two-level chain; the minimum is 3 periods."""
    return [
        make_class(
            1,
            options=[[("Lunes", "08:00", "10:00")], [("Lunes", "14:00", "16:00")]],
            name="Matematica I",
        ),
        make_class(
            2,
            prerequisites=[1],
            options=[[("Lunes", "08:00", "10:00")], [("Martes", "08:00", "10:00")]],
            name="Fisica I",
        ),
        make_class(
            3,
            options=[[("Lunes", "08:30", "09:30")], [("Miercoles", "08:00", "10:00")]],
            name="Ingles",
        ),
        make_class(
            4,
            prerequisites=[2, 3],
            options=[[("Jueves", "10:00", "12:00")]],
            name="Proyecto",
        ),
    ]


@pytest.fixture
def conflicting_classes():
    """Three independent classes, two of which overlap; the minimum is 2 periods."""
    return [
        make_class(1, options=[[("Lunes", "08:00", "10:00")]], name="A"),
        make_class(2, options=[[("Lunes", "09:00", "11:00")]], name="B"),
        make_class(3, options=[[("Martes", "08:00", "10:00")]], name="C"),
    ]


@pytest.fixture
def same_slot_pair():
    """Two independent classes that can only meet Monday 08:00-12:00."""
    return [
        make_class(1, options=[[("Lunes", "08:00", "12:00")]]),
        make_class(2, options=[[("Lunes", "08:00", "12:00")]]),
    ]


@pytest.fixture
def converging_chains():
    """Two independent 2-class chains feeding a capstone; the minimum is 3 periods."""
    return [
        make_class(1, options=[[("Lunes", "08:00", "10:00")]]),
        make_class(2, prerequisites=[1], options=[[("Martes", "08:00", "10:00")]]),
        make_class(3, options=[[("Miercoles", "08:00", "10:00")]]),
        make_class(4, prerequisites=[3], options=[[("Jueves", "08:00", "10:00")]]),
        make_class(5, prerequisites=[2, 4], options=[[("Viernes", "08:00", "10:00")]]),
    ]


@pytest.fixture
def saturday_classes():
    """Classes offered both on Saturday and on a weekday."""
    return [
        make_class(
            1,
            options=[[("Sábado", "08:00", "10:00")], [("Lunes", "18:00", "20:00")]],
        ),
        make_class(
            2,
            options=[[("Sabado", "10:00", "12:00")], [("Martes", "08:00", "10:00")]],
        ),
    ]


@pytest.fixture
def class_factory():
    """Factory for raw class records."""
    return make_class
