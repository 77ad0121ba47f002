import pandas as pd
import streamlit as st

from childrisk.activity import recent
from childrisk.app_state import SECTIONS, navigate, toggle_sidebar, with_assessment, with_export
from childrisk.config import Settings
from childrisk.export.csv_export import ExportFormat, NoDataToExportError, export_filename
from childrisk.models.survey_input import EducationLevel, Region, SurveyInput
from childrisk.orchestrator.dashboard_service import DashboardService
from childrisk.reports.table import SortField, SortOrder, SortState, short_id, sort_records
from childrisk.telemetry import init_telemetry

init_telemetry()

# --- PAGE CONFIGURATION ---
st.set_page_config(
    page_title="Child Health Analytics Dashboard",
    layout="wide",
    initial_sidebar_state="auto"
)

SECTION_LABELS = {
    "admin": "System Monitoring",
    "prediction": "Health Risk Prediction",
    "reports": "Prediction Reports",
    "analysis": "Data Analysis",
}

SORT_LABELS = {
    SortField.ID: "ID",
    SortField.CHILD_AGE: "Child Age",
    SortField.REGION: "Region",
    SortField.RISK_CATEGORY: "Risk Category",
    SortField.PROBABILITY: "Probability",
    SortField.CONFIDENCE: "Confidence",
    SortField.DATE: "Date",
}


# --- BACKEND INITIALIZATION ---
@st.cache_resource
def get_service() -> DashboardService:
    """Build the service once; cached for the session."""
    return DashboardService.from_settings(Settings.from_env())


service = get_service()

if "app_state" not in st.session_state:
    st.session_state.app_state = service.state()
if "sort_state" not in st.session_state:
    st.session_state.sort_state = SortState()


# --- STATE TRANSITIONS (widget callbacks) ---
def _toggle_menu():
    st.session_state.app_state = toggle_sidebar(st.session_state.app_state)


def _go_to(section: str):
    st.session_state.app_state = navigate(st.session_state.app_state, section)


def _sort_by(field: SortField):
    st.session_state.sort_state = st.session_state.sort_state.toggle(field)


def _record_download(count: int):
    # The export is logged when the file is actually downloaded
    entry = service.record_export(count, ExportFormat.CSV)
    st.session_state.app_state = with_export(st.session_state.app_state, ExportFormat.CSV.value, entry)
    st.session_state.pop("pending_export", None)


def render_admin():
    state = st.session_state.app_state
    overview = service.overview()

    cols = st.columns(4)
    cols[0].metric("Total Predictions", overview.total_predictions)
    cols[1].metric("High Risk Cases", overview.high_risk_cases)
    cols[2].metric("Medium Risk Cases", overview.medium_risk_cases)
    cols[3].metric("Low Risk Cases", overview.low_risk_cases)

    st.subheader("Recent Activity")
    for entry in recent(state.activity_logs):
        st.caption(f"**{entry.timestamp}** · {entry.action}")


def render_prediction():
    col_input, col_output = st.columns([1, 1], gap="large")

    with col_input:
        st.subheader("Input Data")
        with st.form(key="prediction_form"):
            child_age = st.number_input("Child Age (months)", min_value=0.0, max_value=60.0)
            household_size = st.number_input("Household Size", min_value=1, max_value=20, step=1)
            income = st.number_input("Household Income Score (0-100)", min_value=0.0, max_value=100.0)
            food = st.number_input("Food Insecurity Score (0-100)", min_value=0.0, max_value=100.0)
            water = st.number_input("Water Access (0-100)", min_value=0.0, max_value=100.0)
            sanitation = st.number_input("Sanitation Access (0-100)", min_value=0.0, max_value=100.0)
            education = st.selectbox("Parent Education Level", [e.value for e in EducationLevel])
            region = st.selectbox("Region", [r.value for r in Region])
            submitted = st.form_submit_button("Generate Prediction", type="primary", use_container_width=True)

    with col_output:
        st.subheader("Prediction Result")
        if not submitted:
            st.info("Submit the form to generate a prediction")
            return

        with st.spinner("Processing..."):
            result = service.predict(SurveyInput(
                child_age_months=child_age,
                household_income_score=income,
                food_insecurity_score=food,
                water_access_score=water,
                sanitation_access_score=sanitation,
                education_level=EducationLevel(education),
                region=Region(region),
                household_size=int(household_size),
            ))

        # The service has just prepended this prediction's activity entry
        st.session_state.app_state = with_assessment(
            st.session_state.app_state, result, service.activity(1)[0]
        )
        st.session_state.pop("pending_export", None)

        st.markdown(f"### {result.risk_category.value} Risk")
        st.caption(f"Prediction ID: {result.id}")
        st.metric("Risk Probability", f"{result.probability_percent}%")
        st.progress(min(1.0, result.probability_percent / 100))
        st.metric("Model Confidence", f"{result.confidence_percent}%")
        st.info(f"**Recommendations**\n\n{result.advisory_note}")


def render_reports():
    state = st.session_state.app_state
    sort_state = st.session_state.sort_state

    sort_cols = st.columns(len(SortField))
    for col, field in zip(sort_cols, SortField):
        label = SORT_LABELS[field]
        if field == sort_state.field:
            label += " ↓" if sort_state.order == SortOrder.DESC else " ↑"
        col.button(label, key=f"sort_{field.value}", on_click=_sort_by, args=(field,), use_container_width=True)

    records = sort_records(state.predictions, sort_state)
    if not records:
        st.info("No predictions yet. Create your first prediction to see results here.")
    else:
        st.dataframe(
            pd.DataFrame([
                {
                    "ID": f"#{short_id(r.id)}",
                    "Child Age": f"{r.child_age_months} months",
                    "Region": r.region.value,
                    "Risk Category": r.risk_category.value,
                    "Probability": f"{r.probability_percent}%",
                    "Date": r.created_at.astimezone(service.settings.display_tz).date().isoformat(),
                }
                for r in records
            ]),
            use_container_width=True,
            hide_index=True,
        )

    if st.button("Prepare CSV export"):
        try:
            document = service.export(ExportFormat.CSV, log_activity=False)
        except NoDataToExportError as e:
            st.warning(str(e))
        else:
            st.session_state.pending_export = (document, len(state.predictions))

    pending = st.session_state.get("pending_export")
    if pending:
        document, count = pending
        st.download_button(
            "Download CSV",
            data=document,
            file_name=export_filename(),
            mime="text/csv",
            on_click=_record_download,
            args=(count,),
        )


def render_analysis():
    view = service.analysis()

    if view.is_empty:
        st.info("No Data Available. Create predictions to see visualizations and analysis of your data.")
        return

    st.caption(f"Prediction trends and patterns across {view.total_records} predictions")
    col_left, col_right = st.columns(2)

    with col_left:
        st.subheader("Risk Category Distribution")
        st.bar_chart(
            pd.DataFrame(
                [{"category": c.name, "count": c.value} for c in view.category_distribution]
            ).set_index("category")
        )

        st.subheader("Risk by Region")
        st.bar_chart(
            pd.DataFrame([g.to_dict() for g in view.region_breakdown]).set_index("name"),
        )

    with col_right:
        st.subheader("Predictions Over Time")
        st.line_chart(
            pd.DataFrame(
                [{"date": p.date, "predictions": p.predictions} for p in view.time_series]
            ).set_index("date")
        )

        st.subheader("Education Level vs Risk")
        st.bar_chart(
            pd.DataFrame([g.to_dict() for g in view.education_breakdown]).set_index("name"),
            horizontal=True,
        )

    st.subheader("Key Insights")
    col_m1, col_m2, col_m3 = st.columns(3)
    col_m1.metric("Most Common Risk", view.most_common_category)
    col_m2.metric("Average Probability", f"{view.average_probability}%")
    col_m3.metric("Most Affected Region", view.most_affected_region)


# --- NAVIGATION ---
app_state = st.session_state.app_state
st.button("☰ Menu", on_click=_toggle_menu)

if app_state.sidebar_open:
    with st.sidebar:
        st.header("Child Health Analytics")
        for name in SECTIONS:
            st.button(
                SECTION_LABELS[name],
                key=f"nav_{name}",
                on_click=_go_to,
                args=(name,),
                type="primary" if name == app_state.active_section else "secondary",
                use_container_width=True,
            )

active = app_state.active_section
st.title(SECTION_LABELS[active])

if active == "admin":
    render_admin()
elif active == "prediction":
    render_prediction()
elif active == "reports":
    render_reports()
else:
    render_analysis()

st.divider()
st.caption("Child Health Analytics Dashboard © 2025")
