"""
Velocity Max — Configuration

Input headers, prediction constants and chart/export settings.
Header names match the velocity tracker CSV export, never renamed by hand.
"""

# ── Input ────────────────────────────────────────────────────────────
DEFAULT_INPUT = "MLAX_Squat_Velocity.csv"

# CSV header → internal column name
COLUMN_MAP = {
    "Name": "name",
    "Set ID": "set_id",
    "Weight (lbs)": "weight",
    "Rep Count": "reps",
    "Avg Mean Velocity (m/s)": "avg_velocity",
}
REQUIRED_COLUMNS = list(COLUMN_MAP.keys())
NUMERIC_COLUMNS = ["weight", "avg_velocity"]
MIN_VALID_SETS = 2

# ── Prediction ───────────────────────────────────────────────────────
TARGET_VELOCITY = 0.25  # m/s — estimated maximal effort

# ── Export ───────────────────────────────────────────────────────────
SUMMARY_FILENAME = "predicted_max_squats.csv"
SUMMARY_COLUMNS = [
    "name",
    "predicted_max_weight",
    "mean_squared_error",
    "r_squared",
    "valid_set_count",
]
CHART_PREFIX = "Max_Squat_Pred_"
CHART_EXTENSION = ".png"

# 800×600 px at scale 3 → 2400×1800 px (8×6 in @ 300 dpi)
CHART_WIDTH = 800
CHART_HEIGHT = 600
CHART_SCALE = 3

# ── Chart ────────────────────────────────────────────────────────────
COLLECTION_PERIOD = "September 2024"
AXIS_MARGIN = 1.1  # x-axis extends 10% past the heaviest of observed / predicted
LINE_POINTS = 100
FLAT_SLOPE_TOL = 1e-9  # relative to the intercept; below this the fit is treated as flat
ANNOTATION_X_FACTOR = 0.8
ANNOTATION_Y_OFFSET = 0.02

POINT_COLOR = "#333333"      # gray20
LINE_COLOR = "#008b8b"       # darkcyan
THRESHOLD_COLOR = "#666666"  # gray40

PL = dict(
    template="plotly_white",
    font=dict(family="Arial", color="#111111"),
    margin=dict(l=60, r=30, t=80, b=60),
    showlegend=False,
)
