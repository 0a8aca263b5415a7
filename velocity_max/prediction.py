"""
Velocity Max — Load-Velocity Prediction

Per athlete: OLS fit of weight on mean velocity, extrapolated to
TARGET_VELOCITY to estimate the max load. Fit quality is in-sample.
"""
import numpy as np
import pandas as pd

from velocity_max.config import TARGET_VELOCITY, MIN_VALID_SETS, SUMMARY_COLUMNS
from velocity_max.loader import group_athletes


class DegenerateFitError(ValueError):
    """The group cannot support a weight-on-velocity line."""


def fit_load_velocity(group: pd.DataFrame) -> dict:
    """
    Fit weight ≈ intercept + slope × avg_velocity.

    Raises DegenerateFitError when there are too few sets, when every set has
    the same velocity (slope undefined) or when the fit is not finite.
    """
    if len(group) < MIN_VALID_SETS:
        raise DegenerateFitError(f"only {len(group)} valid set(s), need {MIN_VALID_SETS}")

    v = group["avg_velocity"].to_numpy(dtype=float)
    w = group["weight"].to_numpy(dtype=float)

    if not (np.isfinite(v).all() and np.isfinite(w).all()):
        raise DegenerateFitError("non-finite weight or velocity")
    if np.ptp(v) == 0:
        raise DegenerateFitError(f"all sets at the same velocity ({v[0]} m/s)")

    slope, intercept = np.polyfit(v, w, 1)
    if not (np.isfinite(slope) and np.isfinite(intercept)):
        raise DegenerateFitError("fit produced non-finite coefficients")

    return {"intercept": float(intercept), "slope": float(slope)}


def predict_weight(fit: dict, velocity):
    return fit["intercept"] + fit["slope"] * velocity


def predict_max(group: pd.DataFrame) -> dict:
    """Prediction Result for one athlete's cleaned sets."""
    fit = fit_load_velocity(group)

    w = group["weight"].to_numpy(dtype=float)
    fitted = predict_weight(fit, group["avg_velocity"].to_numpy(dtype=float))
    residuals = w - fitted

    ss_res = float(np.sum(residuals ** 2))
    ss_tot = float(np.sum((w - w.mean()) ** 2))
    # Dedup on weight guarantees ≥2 distinct weights, so ss_tot > 0
    r_squared = 1.0 - ss_res / ss_tot if ss_tot > 0 else 0.0

    return {
        "name": group["name"].iloc[0],
        "predicted_max_weight": float(predict_weight(fit, TARGET_VELOCITY)),
        "mean_squared_error": float(np.mean(residuals ** 2)),
        "r_squared": float(np.clip(r_squared, 0.0, 1.0)),
        "valid_set_count": int(len(group)),
    }


def predict_all(df: pd.DataFrame) -> tuple[pd.DataFrame, list[dict]]:
    """
    One Prediction Result per athlete, in first-seen order.
    Degenerate athletes are returned in `failures` instead of raising.
    """
    rows = []
    failures = []
    for name, grp in group_athletes(df):
        try:
            rows.append(predict_max(grp))
        except DegenerateFitError as e:
            failures.append({"name": name, "stage": "fit", "reason": str(e)})

    results = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    if not results.empty:
        results["valid_set_count"] = results["valid_set_count"].astype(int)
    return results, failures
