import pytest

from childrisk.app_state import AppState, navigate, toggle_sidebar, with_assessment, with_export
from childrisk.models.risk_assessment import RiskCategory
from childrisk.models.survey_input import Region
from tests.fixtures.surveys import make_assessment


def test_new_assessment_appends_record_and_prepends_log():
    state = AppState()
    first = make_assessment("1", RiskCategory.LOW, Region.NORTH)
    second = make_assessment("2", RiskCategory.HIGH, Region.SOUTH)

    state = with_assessment(with_assessment(state, first), second)

    assert [p.id for p in state.predictions] == ["1", "2"]
    assert state.activity_logs[0].action == "New high risk prediction created for South region"
    assert state.activity_logs[1].action == "New low risk prediction created for North region"


def test_transitions_leave_previous_state_untouched():
    original = AppState()

    updated = with_assessment(original, make_assessment("1"))

    assert original.predictions == ()
    assert original.activity_logs == ()
    assert updated is not original


def test_export_logs_record_count():
    state = with_assessment(AppState(), make_assessment("1"))

    state = with_export(state, "csv")

    assert state.activity_logs[0].action == "Exported 1 predictions to CSV"


def test_navigation_closes_sidebar():
    state = toggle_sidebar(AppState())
    assert state.sidebar_open is True

    state = navigate(state, "analysis")

    assert state.active_section == "analysis"
    assert state.sidebar_open is False


def test_unknown_section_is_rejected():
    with pytest.raises(ValueError):
        navigate(AppState(), "settings")
