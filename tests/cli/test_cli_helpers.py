import warnings

import pytest
import typer

from rosterkit.cli._utils import collect_warnings, format_hours, parse_date_option
from rosterkit.core.errors import RotationConfigWarning
from rosterkit.scheduling.timeline import CalendarDate


def test_parse_date_option_success():
    assert parse_date_option("2024-02-29") == CalendarDate(2024, 2, 29)


@pytest.mark.parametrize("value", ["2024-2-1", "tomorrow", "2023-02-29"])
def test_parse_date_option_invalid(value):
    with pytest.raises(typer.BadParameter):
        parse_date_option(value, option="--start")


def test_format_hours():
    assert format_hours("00:00", "23:59") == "00:00-23:59"


def test_collect_warnings_filters_by_category():
    with pytest.warns(DeprecationWarning):
        with collect_warnings(RotationConfigWarning) as messages:
            warnings.warn("rotation skipped", RotationConfigWarning)
            warnings.warn("rotation skipped", RotationConfigWarning)
            warnings.warn("old api", DeprecationWarning)
    assert messages == ["rotation skipped"]
