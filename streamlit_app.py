"""Streamlit dashboard for Aadhaar enrolment and update activity."""

from __future__ import annotations

from datetime import date
from typing import Any, Sequence

import pandas as pd
import streamlit as st

from app.config import configure_logging, get_dashboard_settings
from app.domain.filters import (
    ALL_CATEGORIES,
    CATEGORY_LABELS,
    DEFAULT_DATE_RANGE,
    TIME_WINDOW_LABELS,
    FilterSelection,
    TimeWindow,
)
from app.domain.regions import ALL_REGIONS, REGION_CHOICES
from app.formatting import format_number, format_percent
from app.providers import StaticFixtureProvider, get_fixture_provider
from app.services.aggregation_service import (
    biometric_updates_by_state,
    demographic_updates_by_state,
    districts_by_state,
    enrolments_by_state,
    filter_by_date_range,
    unique_states,
)
from app.services.csv_loader_service import CSVLoader, CSVLoadResult
from app.services.metrics_service import get_filtered_metrics
from app.services.section_service import SectionService, rows_to_records

configure_logging()
_settings = get_dashboard_settings()
st.set_page_config(page_title=_settings.page_title, page_icon="🆔", layout="wide")

_FILTER_DEFAULTS: dict[str, Any] = {
    "region": ALL_REGIONS,
    "time_window": TimeWindow.LAST_YEAR.value,
    "category": ALL_CATEGORIES,
    "date_range": DEFAULT_DATE_RANGE,
}

_DATASETS = {
    "Enrolment": ("load_enrolment", enrolments_by_state),
    "Demographic updates": ("load_demographic_updates", demographic_updates_by_state),
    "Biometric updates": ("load_biometric_updates", biometric_updates_by_state),
}


@st.cache_resource(show_spinner=False)
def _load_provider() -> StaticFixtureProvider:
    """Validate fixtures once per server process."""
    return get_fixture_provider()


@st.cache_resource(show_spinner=False)
def _load_section_service() -> SectionService:
    return SectionService(_load_provider())


@st.cache_data(show_spinner="Loading CSV extract...")
def _load_dataset(dataset: str) -> CSVLoadResult:
    loader_method, _ = _DATASETS[dataset]
    return getattr(CSVLoader(), loader_method)()


def _frame(rows: Sequence[object]) -> pd.DataFrame:
    return pd.DataFrame(rows_to_records(rows))


def _reset_filters() -> None:
    for key, value in _FILTER_DEFAULTS.items():
        st.session_state[key] = value


def _current_selection() -> FilterSelection:
    window = st.session_state.time_window
    date_range: tuple[date, date] | None = None
    picked = st.session_state.date_range
    # The picker yields a single date while the user is mid-selection.
    if isinstance(picked, (tuple, list)) and len(picked) == 2:
        date_range = (picked[0], picked[1])
    return FilterSelection(
        region=st.session_state.region,
        time_window=window,
        category=st.session_state.category,
        date_range=date_range,
    )


for _key, _value in _FILTER_DEFAULTS.items():
    if _key not in st.session_state:
        st.session_state[_key] = _value


with st.sidebar:
    st.header("Filters")
    st.selectbox(
        "Region",
        options=list(REGION_CHOICES),
        format_func=lambda code: REGION_CHOICES[code],
        key="region",
    )
    st.selectbox(
        "Time period",
        options=list(TIME_WINDOW_LABELS),
        format_func=lambda window: TIME_WINDOW_LABELS[window],
        key="time_window",
    )
    if st.session_state.time_window == TimeWindow.CUSTOM.value:
        st.date_input("Date range", key="date_range")
    st.selectbox(
        "Update type",
        options=list(CATEGORY_LABELS),
        format_func=lambda category: CATEGORY_LABELS[category],
        key="category",
    )
    st.button("Reset filters", on_click=_reset_filters, use_container_width=True)


selection = _current_selection()
sections = _load_section_service()
provider = _load_provider()
metrics = get_filtered_metrics(selection)

st.title(_settings.page_title)
st.caption(
    f"{REGION_CHOICES.get(selection.region, selection.region)} · "
    f"{TIME_WINDOW_LABELS.get(selection.time_window, selection.time_window)} · "
    f"{CATEGORY_LABELS.get(selection.category, selection.category)}"
)

(
    overview_tab,
    enrolment_tab,
    behaviour_tab,
    anomaly_tab,
    societal_tab,
    visual_tab,
    explorer_tab,
) = st.tabs(
    [
        "Overview",
        "Enrolment Analysis",
        "Update Behaviour",
        "Anomaly Detection",
        "Societal Signals",
        "Visual Insights",
        "Data Explorer",
    ]
)

with overview_tab:
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Enrolments", format_number(metrics.total_enrolments), metrics.enrolment_trend)
    c2.metric("Total Updates", format_number(metrics.total_updates), metrics.updates_trend)
    c3.metric(
        "Update Friction Index",
        f"{metrics.friction_index:.2f}",
        metrics.friction_trend,
        delta_color="inverse",
    )
    c4.metric("Enrolment–Update Gap", format_number(metrics.gap), metrics.gap_trend, delta_color="off")

    left, right = st.columns(2)
    with left:
        st.subheader("Enrolment vs updates (millions)")
        gap_df = _frame(provider.gap_analysis())
        st.line_chart(gap_df, x="month", y=["enrolments", "updates"])
    with right:
        st.subheader("National friction trend")
        ufi_df = _frame(provider.national_friction_trend())
        st.line_chart(ufi_df, x="month", y=["ufi", "baseline"])

    st.subheader("Active alerts")
    for alert in provider.anomaly_alerts():
        box = st.error if alert.severity == "high" else st.warning
        box(f"**{alert.title}** · {alert.location} · {alert.time_window}\n\n{alert.description}")

with enrolment_tab:
    kpis = sections.enrolment_kpis(selection)
    c1, c2, c3 = st.columns(3)
    c1.metric("Total Enrolments", kpis.total_enrolments)
    c2.metric("Infant Enrolments (0-5)", kpis.infant_enrolments)
    c3.metric("Daily Average", kpis.daily_average)

    st.subheader("Monthly enrolments")
    st.area_chart(_frame(provider.monthly_enrolments()), x="month", y=["newborns", "adults"])

    a, b, c = st.columns(3)
    for column, title, rows in (
        (a, "Age distribution", provider.age_distribution()),
        (b, "Gender distribution", provider.gender_distribution()),
        (c, "Urban / rural", provider.urban_rural_split()),
    ):
        with column:
            st.markdown(f"**{title}**")
            st.bar_chart(_frame(rows), x="name", y="share")

with behaviour_tab:
    behaviour = sections.update_behaviour_kpis(selection)
    c1, c2, c3 = st.columns(3)
    c1.metric("Update Friction Index", f"{metrics.friction_index:.2f}")
    c2.metric("First-attempt Completion", f"{behaviour.completion_rate}%")
    c3.metric("Repeat Update Rate", f"{behaviour.repeat_rate}%")

    st.subheader("Monthly friction")
    friction_df = _frame(sections.ufi_trend(selection))
    left, right = st.columns(2)
    with left:
        st.line_chart(friction_df, x="month", y="ufi")
    with right:
        st.bar_chart(friction_df, x="month", y="completion_rate")

    left, right = st.columns(2)
    with left:
        st.markdown("**Update types**")
        st.bar_chart(_frame(sections.update_type_breakdown(selection)), x="name", y="share")
    with right:
        st.markdown("**Repeat updates per resident**")
        st.dataframe(_frame(provider.repeat_updates()), use_container_width=True, hide_index=True)

with anomaly_tab:
    anomaly = sections.anomaly_metrics(selection)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Active Anomalies", anomaly.active_anomalies, anomaly.trend_value, delta_color="inverse")
    c2.metric("High Severity", anomaly.high_severity)
    c3.metric("Avg. Resolution", anomaly.resolution_label)
    c4.metric("Detection Accuracy", anomaly.accuracy_label)

    left, right = st.columns(2)
    with left:
        st.subheader("Activity vs expected")
        st.line_chart(
            _frame(provider.anomaly_timeline()),
            x="label",
            y=["normal", "actual", "threshold"],
        )
    with right:
        st.subheader("Weekly detections")
        st.bar_chart(
            _frame(provider.weekly_anomaly_stats()),
            x="week",
            y=["detected", "resolved", "pending"],
        )

    st.subheader("Investigation log")
    for case in provider.detailed_anomalies():
        with st.expander(f"{case.id} · {case.metric} · {case.location} ({case.status})"):
            st.markdown(f"**Deviation:** {case.deviation} ({case.baseline_value:,} → {case.actual_value:,})")
            st.markdown(f"**Hypothesis:** {case.hypothesis}")
            st.caption(f"Assigned to {case.assigned_to} · opened {case.created_at}")

with societal_tab:
    societal = sections.societal_kpis(selection)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Signal Clusters", societal.signal_clusters)
    c2.metric("Migration Corridors", societal.migration_corridors)
    c3.metric("Pattern Match", societal.pattern_match)
    c4.metric("New Signals", societal.new_signals)

    left, right = st.columns(2)
    with left:
        st.subheader("Migration corridors")
        corridors = sections.migration_corridors(selection)
        if corridors:
            st.dataframe(_frame(corridors), use_container_width=True, hide_index=True)
        else:
            st.info("No corridors recorded for this region.")
    with right:
        st.subheader("Seasonal life events")
        st.line_chart(
            _frame(sections.seasonal_patterns(selection)),
            x="month",
            y=["migration", "marriage", "education"],
        )

    st.subheader("Life-event signals")
    st.dataframe(_frame(provider.life_event_signals()), use_container_width=True, hide_index=True)
    st.subheader("Demographic shifts")
    st.dataframe(_frame(provider.demographic_shifts()), use_container_width=True, hide_index=True)

with visual_tab:
    visual = sections.visual_kpis(selection)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Coverage", visual.coverage)
    c2.metric("Active Centres", visual.active_centres)
    c3.metric("Daily Transactions", visual.daily_transactions)
    c4.metric("Data Quality", visual.data_quality)

    left, right = st.columns(2)
    with left:
        st.subheader("System performance")
        radar_df = _frame(sections.radar_scores(selection))
        st.bar_chart(radar_df, x="metric", y="value")
    with right:
        st.subheader("Quarterly volumes")
        st.bar_chart(
            _frame(sections.quarterly_trends(selection)),
            x="quarter",
            y=["enrolments", "updates"],
        )

    left, right = st.columns(2)
    with left:
        st.subheader("State performance")
        st.dataframe(
            _frame(sections.state_performance(selection)),
            use_container_width=True,
            hide_index=True,
        )
    with right:
        st.subheader("Regional distribution")
        st.bar_chart(_frame(provider.regional_distribution()), x="name", y="size")

with explorer_tab:
    st.subheader("Raw CSV extracts")
    dataset = st.selectbox("Dataset", options=list(_DATASETS))
    result = _load_dataset(dataset)
    if result.error:
        st.error(f"Could not load {dataset.lower()} data: {result.error}")
    elif not result.records:
        st.info("The dataset is empty.")
    else:
        frame = result.to_frame()
        st.caption(
            f"{len(result.records):,} record(s) loaded; {result.rows_dropped:,} malformed row(s) skipped."
        )

        c1, c2 = st.columns(2)
        start = c1.text_input("From (DD-MM-YYYY)", value="")
        end = c2.text_input("To (DD-MM-YYYY)", value="")
        if start and end:
            try:
                frame = filter_by_date_range(frame, start, end)
            except ValueError:
                st.warning("Dates must use the DD-MM-YYYY format; showing all rows.")

        _, aggregate = _DATASETS[dataset]
        totals = aggregate(frame)
        st.markdown(f"**Totals by state** · {format_percent(100.0 * len(frame) / len(result.records))} of rows")
        if totals.empty:
            st.info("No rows fall within the selected dates.")
        else:
            st.bar_chart(totals)

        states = unique_states(frame)
        if states:
            state = st.selectbox("State", options=states)
            st.write(", ".join(districts_by_state(frame, state)) or "No districts.")
        st.dataframe(frame.head(500), use_container_width=True, hide_index=True)
