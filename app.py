"""
🏋️ Velocity Max — Streamlit Dashboard
Run: streamlit run app.py
"""
import io
from pathlib import Path

import streamlit as st

from velocity_max.loader import read_sets, clean_sets, count_athletes
from velocity_max.prediction import predict_all
from velocity_max.charts import build_chart, chart_filename
from velocity_max.config import DEFAULT_INPUT, COLLECTION_PERIOD, SUMMARY_FILENAME, SUMMARY_COLUMNS

# ── Page Config ──────────────────────────────────────────────────────
st.set_page_config(page_title="Velocity Max", page_icon="🏋️", layout="wide", initial_sidebar_state="expanded")


# ── Data Loading ─────────────────────────────────────────────────────
@st.cache_data
def load_data(source: bytes | str):
    """Clean + predict. `source` is uploaded CSV bytes or a path on disk."""
    raw = read_sets(io.BytesIO(source) if isinstance(source, bytes) else source)
    df = clean_sets(raw)
    results, failures = predict_all(df)
    return {"df": df, "results": results, "failures": failures, "athletes": count_athletes(raw)}


with st.sidebar:
    st.markdown("# 🏋️ Velocity Max")
    st.caption("Load-velocity max squat estimates")
    st.divider()
    uploaded = st.file_uploader("Set velocity CSV", type="csv")
    period = st.text_input("Collection period", COLLECTION_PERIOD)

if uploaded is not None:
    source = uploaded.getvalue()
elif Path(DEFAULT_INPUT).is_file():
    source = DEFAULT_INPUT
else:
    st.info(f"Upload a CSV or place {DEFAULT_INPUT} next to app.py.")
    st.stop()

try:
    data = load_data(source)
except (FileNotFoundError, ValueError) as e:
    st.error(f"Error loading data: {e}")
    st.stop()

df, results, failures = data["df"], data["results"], data["failures"]

if failures:
    with st.expander(f"⚠️ {len(failures)} degenerate fits", expanded=results.empty):
        for f in failures:
            st.caption(f"{f['name']}: {f['reason']}")

if results.empty:
    if df.empty:
        st.warning("No athlete has ≥2 valid sets.")
    else:
        st.warning(f"Every athlete with ≥2 valid sets had a degenerate fit ({len(failures)}).")
    st.stop()

# ── Summary ──────────────────────────────────────────────────────────
st.markdown("## 📊 Predicted Max Squats")
c1, c2, c3, c4 = st.columns(4)
c1.metric("Athletes", data["athletes"])
c2.metric("Predicted", len(results))
c3.metric("Skipped (<2 sets)", data["athletes"] - df["name"].nunique())
c4.metric("Failed fits", len(failures))

disp = results.copy()
disp["predicted_max_weight"] = disp["predicted_max_weight"].round(1)
disp["mean_squared_error"] = disp["mean_squared_error"].round(1)
disp["r_squared"] = disp["r_squared"].round(3)
st.dataframe(disp, use_container_width=True, hide_index=True)

buf = io.StringIO()
results[SUMMARY_COLUMNS].to_csv(buf, index=False)
st.download_button("⬇️ Download summary", buf.getvalue(), file_name=SUMMARY_FILENAME, mime="text/csv")

# ── Athlete chart ────────────────────────────────────────────────────
st.divider()
selected = st.selectbox("Athlete", results["name"].tolist())
if selected:
    result = results[results["name"] == selected].iloc[0].to_dict()
    grp = df[df["name"] == selected]
    col1, col2 = st.columns([2, 1])
    with col1:
        fig = build_chart(grp, result, period=period)
        st.plotly_chart(fig, use_container_width=True, key="athlete_chart")
        st.caption(f"Export name: {chart_filename(selected)}")
    with col2:
        st.markdown("#### Sets")
        st.dataframe(grp[["set_id", "weight", "reps", "avg_velocity"]], use_container_width=True, hide_index=True)
