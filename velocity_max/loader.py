"""
Velocity Max — Set Loader / Cleaner

Reads the velocity tracker CSV and turns it into one clean row per
(athlete, weight), keeping only athletes with enough sets to fit a line.
"""
from pathlib import Path

import pandas as pd

from velocity_max.config import COLUMN_MAP, REQUIRED_COLUMNS, NUMERIC_COLUMNS, MIN_VALID_SETS


def read_sets(source) -> pd.DataFrame:
    """
    Read the raw CSV from a path or an open file/buffer.
    Fails fast on a missing file or missing headers.
    """
    if isinstance(source, (str, Path)):
        source = Path(source)
        if not source.is_file():
            raise FileNotFoundError(f"Input file not found: {source}")
        label = source.name
    else:
        label = getattr(source, "name", "input")

    raw = pd.read_csv(source, dtype={"Name": str})

    missing = [c for c in REQUIRED_COLUMNS if c not in raw.columns]
    if missing:
        raise ValueError(f"{label} is missing required columns: {', '.join(missing)}")
    return raw


def _coerce_numeric(df: pd.DataFrame, column: str) -> pd.Series:
    """Strict float conversion — any unparseable value aborts the run."""
    try:
        return pd.to_numeric(df[column], errors="raise").astype(float)
    except (ValueError, TypeError) as e:
        bad = df.loc[pd.to_numeric(df[column], errors="coerce").isna() & df[column].notna(), column]
        sample = bad.iloc[0] if not bad.empty else "?"
        raise ValueError(f"Column '{column}' has a non-numeric value: {sample!r}") from e


def clean_sets(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Cleaned Records, in input order:
    1. Keep + rename the required columns
    2. Coerce weight / avg_velocity to float (strict)
    3. Keep the first set per (name, weight) — repeated weights are resubmissions
    4. Drop sets missing weight or velocity
    5. Drop athletes left with fewer than MIN_VALID_SETS sets
    """
    if raw.empty:
        return pd.DataFrame(columns=list(COLUMN_MAP.values()))

    df = raw[REQUIRED_COLUMNS].rename(columns=COLUMN_MAP).copy()
    for col in NUMERIC_COLUMNS:
        df[col] = _coerce_numeric(df, col)

    df = df.drop_duplicates(subset=["name", "weight"], keep="first")
    df = df.dropna(subset=["weight", "avg_velocity"])

    set_counts = df.groupby("name", sort=False)["weight"].transform("size")
    df = df[set_counts >= MIN_VALID_SETS]
    return df.reset_index(drop=True)


def load_sets(path) -> pd.DataFrame:
    return clean_sets(read_sets(path))


def count_athletes(raw: pd.DataFrame) -> int:
    """Distinct athletes in the raw file (before any cleaning)."""
    if raw.empty or "Name" not in raw.columns:
        return 0
    return int(raw["Name"].dropna().nunique())


def group_athletes(df: pd.DataFrame):
    """Yield (name, group) in first-seen order."""
    if df.empty:
        return
    for name, grp in df.groupby("name", sort=False):
        yield name, grp.reset_index(drop=True)
