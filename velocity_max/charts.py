"""
Velocity Max — Per-athlete load-velocity charts (plotly)

The model is fit velocity → weight; the chart is drawn in the weight/velocity
plane, so the regression line is the inverted fit.
"""
import os
from pathlib import Path

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from velocity_max.config import (
    TARGET_VELOCITY,
    COLLECTION_PERIOD,
    AXIS_MARGIN,
    LINE_POINTS,
    FLAT_SLOPE_TOL,
    ANNOTATION_X_FACTOR,
    ANNOTATION_Y_OFFSET,
    CHART_PREFIX,
    CHART_EXTENSION,
    CHART_WIDTH,
    CHART_HEIGHT,
    CHART_SCALE,
    POINT_COLOR,
    LINE_COLOR,
    THRESHOLD_COLOR,
    PL,
)
from velocity_max.prediction import fit_load_velocity


def chart_filename(name: str) -> str:
    """Max_Squat_Pred_First_Last.png"""
    safe = str(name).replace(" ", "_").replace(os.sep, "_").replace("/", "_")
    return f"{CHART_PREFIX}{safe}{CHART_EXTENSION}"


def regression_line(group: pd.DataFrame, predicted_max: float) -> pd.DataFrame:
    """
    Weight → velocity points along the inverted fit, from the lightest set to
    10% past the heavier of (heaviest set, predicted max).
    Empty when the fit is flat (a ~0 slope cannot be inverted).
    """
    fit = fit_load_velocity(group)
    x_max = max(group["weight"].max(), predicted_max) * AXIS_MARGIN
    if np.isclose(fit["slope"], 0, atol=FLAT_SLOPE_TOL * max(1.0, abs(fit["intercept"]))):
        return pd.DataFrame(columns=["weight", "avg_velocity"])

    weights = np.linspace(group["weight"].min(), x_max, LINE_POINTS)
    return pd.DataFrame({
        "weight": weights,
        "avg_velocity": (weights - fit["intercept"]) / fit["slope"],
    })


def build_chart(group: pd.DataFrame, result: dict, period: str = COLLECTION_PERIOD) -> go.Figure:
    """Diagnostic chart for one athlete: sets, fitted line, 0.25 m/s threshold."""
    name = str(result["name"])
    predicted = float(result["predicted_max_weight"])
    x_max = max(group["weight"].max(), predicted) * AXIS_MARGIN

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=group["weight"], y=group["avg_velocity"], mode="markers",
        name="Sets", marker=dict(color=POINT_COLOR, size=10),
    ))

    line = regression_line(group, predicted)
    if not line.empty:
        fig.add_trace(go.Scatter(
            x=line["weight"], y=line["avg_velocity"], mode="lines",
            name="Fit", line=dict(color=LINE_COLOR, width=2),
        ))

    fig.add_hline(y=TARGET_VELOCITY, line_dash="dash", line_color=THRESHOLD_COLOR)
    fig.add_annotation(
        x=predicted * ANNOTATION_X_FACTOR,
        y=TARGET_VELOCITY + ANNOTATION_Y_OFFSET,
        text=f"Predicted Max: {round(predicted, 1)} lbs",
        showarrow=False, font=dict(size=13, color="black"),
    )

    fig.update_layout(
        **PL,
        title=dict(
            text=f"<b>Estimated Max Squat: {name}</b><br><sup>{period}</sup>",
            font=dict(size=18),
        ),
        xaxis_title="Weight (lbs)",
        yaxis_title="Average Velocity (m/s)",
    )
    fig.update_xaxes(range=[0, x_max])
    # y-range from the observed sets + threshold, not the fitted line
    v = group["avg_velocity"]
    fig.update_yaxes(range=[min(0.0, v.min()), max(v.max(), TARGET_VELOCITY) * AXIS_MARGIN])
    return fig


def save_chart(fig: go.Figure, path) -> Path:
    """Write the chart as PNG. Raises OSError naming the file on failure."""
    path = Path(path)
    try:
        fig.write_image(str(path), format="png", width=CHART_WIDTH, height=CHART_HEIGHT, scale=CHART_SCALE)
    except OSError as e:
        raise OSError(f"Could not write chart {path}: {e}") from e
    return path
