import warnings

import pytest

from rosterkit.availability import (
    DEFAULT_PRESENCE,
    infer_override_status,
    resolve_presence,
    resolve_range,
)
from rosterkit.core.errors import DateParseError, RotationConfigWarning
from rosterkit.scenario.contract.models import (
    Person,
    PersonalRotation,
    PresenceOverride,
    PresenceSource,
    PresenceStatus,
    TeamRotation,
)

ALPHA = TeamRotation(team_id="ALPHA", start_date="2024-01-01", days_on_base=7, days_at_home=7)


def _person(**kwargs) -> Person:
    payload = {"id": "P1", "team_id": "ALPHA"}
    payload.update(kwargs)
    return Person.model_validate(payload)


def test_override_beats_rotation_home():
    person = _person(overrides={"2024-03-05": {"is_available": True}})
    # 2024-03-05 is day 8 of a 7/7 cycle, i.e. home
    assert resolve_presence(_person(), "2024-03-05", [ALPHA]).status is PresenceStatus.HOME

    result = resolve_presence(person, "2024-03-05", [ALPHA])
    assert result.is_available is True
    assert result.source is PresenceSource.MANUAL
    assert result.status is PresenceStatus.FULL


def test_team_rotation_phases_map_to_hours():
    person = _person()
    arrival = resolve_presence(person, "2024-01-01", [ALPHA])
    assert (arrival.status, arrival.source) == (PresenceStatus.ARRIVAL, PresenceSource.TEAM_ROTATION)
    assert (arrival.start_hour, arrival.end_hour) == ("00:00", "23:59")

    home = resolve_presence(person, "2024-01-08", [ALPHA])
    assert home.is_available is False
    assert (home.start_hour, home.end_hour) == ("00:00", "00:00")


def test_personal_rotation_precedes_team_rotation():
    person = _person(
        personal_rotation={"is_active": True, "start_date": "2024-01-08", "days_on": 3, "days_off": 3}
    )
    result = resolve_presence(person, "2024-01-08", [ALPHA])
    assert result.status is PresenceStatus.ARRIVAL
    assert result.source is PresenceSource.PERSONAL_ROTATION


def test_inactive_personal_rotation_is_ignored():
    person = _person(
        personal_rotation={"is_active": False, "start_date": "2024-01-08", "days_on": 3, "days_off": 3}
    )
    result = resolve_presence(person, "2024-01-08", [ALPHA])
    assert result.source is PresenceSource.TEAM_ROTATION


def test_before_rotation_start_falls_through_to_default():
    result = resolve_presence(_person(), "2023-12-31", [ALPHA])
    assert result == DEFAULT_PRESENCE
    assert result.source is PresenceSource.DEFAULT


def test_no_team_no_rotation_is_default():
    result = resolve_presence(Person(id="P9"), "2024-06-01")
    assert result.is_available is True
    assert result.status is PresenceStatus.FULL
    assert result.source is PresenceSource.DEFAULT


def test_incomplete_rotation_warns_and_falls_through():
    person = _person(personal_rotation={"is_active": True, "days_on": 5, "days_off": 2})
    with pytest.warns(RotationConfigWarning, match="personal rotation"):
        result = resolve_presence(person, "2024-01-01", [ALPHA])
    assert result.source is PresenceSource.TEAM_ROTATION

    broken_team = TeamRotation(team_id="ALPHA", start_date="2024-01-01", days_on_base=0, days_at_home=7)
    with pytest.warns(RotationConfigWarning, match="Team ALPHA"):
        result = resolve_presence(_person(), "2024-01-01", [broken_team])
    assert result.source is PresenceSource.DEFAULT


def test_team_rotation_end_date_resolves_home():
    rotation = ALPHA.model_copy(update={"end_date": ALPHA.start_date.add_days(20)})
    result = resolve_presence(_person(), "2024-01-22", [rotation])
    assert result.status is PresenceStatus.HOME
    assert result.source is PresenceSource.TEAM_ROTATION


@pytest.mark.parametrize(
    "override,expected",
    [
        ({"is_available": False, "end_hour": "00:00"}, PresenceStatus.HOME),
        ({"start_hour": "10:00"}, PresenceStatus.ARRIVAL),
        ({"end_hour": "15:30"}, PresenceStatus.DEPARTURE),
        ({}, PresenceStatus.FULL),
        ({"start_hour": "10:00", "status": "full"}, PresenceStatus.FULL),
        ({"status": "base"}, PresenceStatus.FULL),
    ],
)
def test_override_status_inference(override, expected):
    assert infer_override_status(PresenceOverride.model_validate(override)) is expected


def test_override_hours_are_normalised():
    override = PresenceOverride.model_validate({"start_hour": "06:30:00", "end_hour": ""})
    assert (override.start_hour, override.end_hour) == ("06:30", "23:59")


def test_resolution_is_pure():
    person = _person(overrides={"2024-01-03": {"is_available": False}})
    first = [r.model_dump_json() for _, r in resolve_range(person, "2024-01-01", 21, [ALPHA])]
    second = [r.model_dump_json() for _, r in resolve_range(person, "2024-01-01", 21, [ALPHA])]
    assert first == second


def test_resolve_range_yields_each_day():
    days = [str(day) for day, _ in resolve_range(_person(), "2024-01-30", 3, [ALPHA])]
    assert days == ["2024-01-30", "2024-01-31", "2024-02-01"]


def test_malformed_date_raises():
    with pytest.raises(DateParseError):
        resolve_presence(_person(), "2024/01/01", [ALPHA])


def test_personal_rotation_before_start_falls_through_to_team():
    person = _person(
        personal_rotation={"is_active": True, "start_date": "2024-01-10", "days_on": 3, "days_off": 3}
    )
    before = resolve_presence(person, "2024-01-05", [ALPHA])
    assert before.source is PresenceSource.TEAM_ROTATION
    assert before.status is PresenceStatus.FULL

    on_start = resolve_presence(person, "2024-01-10", [ALPHA])
    assert on_start.source is PresenceSource.PERSONAL_ROTATION


def test_one_day_team_stint_is_always_arrival():
    rotation = TeamRotation(team_id="ALPHA", start_date="2024-01-01", days_on_base=1, days_at_home=2)
    results = [r for _, r in resolve_range(_person(), "2024-01-01", 9, [rotation])]
    on_days = [results[i] for i in (0, 3, 6)]
    assert all(r.status is PresenceStatus.ARRIVAL and r.is_available for r in on_days)
    off_days = [r for i, r in enumerate(results) if i % 3]
    assert all(r.status is PresenceStatus.HOME for r in off_days)


def test_config_errors_go_to_callback_instead_of_warnings():
    person = _person(personal_rotation={"is_active": True, "days_on": 5, "days_off": 2})
    messages: list[str] = []
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        result = resolve_presence(person, "2024-01-01", [ALPHA], on_config_error=messages.append)
    assert result.source is PresenceSource.TEAM_ROTATION
    assert len(messages) == 1
    assert "missing start_date" in messages[0]
