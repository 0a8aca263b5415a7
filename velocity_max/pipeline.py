"""
Velocity Max — Batch Runner
Run manually: python -m velocity_max.pipeline [INPUT] [-o OUTPUT_DIR]
"""
import argparse
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd

from velocity_max.config import DEFAULT_INPUT, SUMMARY_FILENAME, SUMMARY_COLUMNS, COLLECTION_PERIOD
from velocity_max.loader import read_sets, clean_sets, count_athletes, group_athletes
from velocity_max.prediction import predict_all
from velocity_max.charts import build_chart, chart_filename, save_chart


def write_summary(results: pd.DataFrame, path) -> Path:
    """Summary table, one row per predicted athlete."""
    path = Path(path)
    try:
        results[SUMMARY_COLUMNS].to_csv(path, index=False)
    except OSError as e:
        raise OSError(f"Could not write summary table {path}: {e}") from e
    print(f"💾 Saved summary to {path}")
    return path


def export_charts(
    df: pd.DataFrame,
    results: pd.DataFrame,
    output_dir,
    period: str = COLLECTION_PERIOD,
    dry_run: bool = False,
) -> tuple[list[Path], list[dict]]:
    """
    One chart per predicted athlete. Athletes without a prediction are skipped;
    a failed write, or a name that maps to a chart file already taken, is
    recorded and the next athlete still runs.
    """
    output_dir = Path(output_dir)
    by_name = {r["name"]: r for r in results.to_dict("records")}

    written = []
    failures = []
    claimed = {}  # chart path → athlete name
    for name, grp in group_athletes(df):
        result = by_name.get(name)
        if result is None:
            continue
        path = output_dir / chart_filename(name)
        if path in claimed:
            reason = f"chart {path.name} already used by {claimed[path]!r}"
            failures.append({"name": name, "stage": "export", "reason": reason})
            print(f"   ⚠️  {name}: {reason}")
            continue
        claimed[path] = name
        fig = build_chart(grp, result, period=period)
        if dry_run:
            print(f"   🏃 {name}: would save {path}")
            continue
        try:
            save_chart(fig, path)
        except (OSError, ValueError) as e:
            failures.append({"name": name, "stage": "export", "reason": str(e)})
            print(f"   ⚠️  {name}: {e}")
            continue
        written.append(path)
        print(f"💾 Saved plot to {path}")

    return written, failures


def run_pipeline(
    input_path=DEFAULT_INPUT,
    output_dir=".",
    period: str = COLLECTION_PERIOD,
    dry_run: bool = False,
) -> dict:
    """
    Full batch:
    1. Read + clean the set CSV
    2. Fit + predict per athlete
    3. Write summary table
    4. Write one chart per athlete
    """
    print("🏋️  Velocity Max — Starting...")
    print(f"   {datetime.now().isoformat()}")

    # 1. Load
    print(f"\n📥 Reading {input_path}...")
    raw = read_sets(input_path)
    df = clean_sets(raw)
    total_athletes = count_athletes(raw)
    eligible = df["name"].nunique() if not df.empty else 0
    print(f"   {len(raw)} rows, {total_athletes} athletes")
    print(f"   {len(df)} valid sets across {eligible} athletes with ≥2 sets")

    # 2. Predict
    print("\n📊 Fitting load-velocity profiles...")
    results, failures = predict_all(df)
    for f in failures:
        print(f"   ⚠️  {f['name']}: degenerate fit — {f['reason']}")
    for _, row in results.iterrows():
        print(f"   {row['name']}: {row['predicted_max_weight']:.1f} lbs "
              f"(R² {row['r_squared']:.2f}, {row['valid_set_count']} sets)")

    # 3 + 4. Export
    output_dir = Path(output_dir)
    summary_path = None
    chart_paths = []
    if dry_run:
        print("\n🏃 DRY RUN — skipping file writes")
    else:
        output_dir.mkdir(parents=True, exist_ok=True)
        print()
        summary_path = write_summary(results, output_dir / SUMMARY_FILENAME)
    chart_paths, export_failures = export_charts(df, results, output_dir, period=period, dry_run=dry_run)
    failures += export_failures

    failed_names = {f["name"] for f in failures}
    return {
        "athletes": total_athletes,
        "processed": len(results) - len(failed_names & set(results["name"])),
        "skipped": total_athletes - eligible,
        "failed": len(failed_names),
        "failures": failures,
        "results": results,
        "summary_path": summary_path,
        "chart_paths": chart_paths,
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Estimate max squat from load-velocity sets.")
    parser.add_argument("input", nargs="?", default=DEFAULT_INPUT, help="set velocity CSV")
    parser.add_argument("-o", "--output-dir", default=".", help="where to write the table and charts")
    parser.add_argument("--period", default=COLLECTION_PERIOD, help="chart subtitle (collection period)")
    parser.add_argument("--dry-run", action="store_true", help="compute and print, write nothing")
    args = parser.parse_args(argv)

    try:
        result = run_pipeline(args.input, args.output_dir, period=args.period, dry_run=args.dry_run)
    except Exception as e:
        print(f"\n❌ Velocity Max FAILED: {e}")
        return 1

    print(f"\n{'='*50}")
    print("📊 Run Summary:")
    print(f"   Processed: {result['processed']}")
    print(f"   Skipped (<2 sets): {result['skipped']}")
    print(f"   Failed: {result['failed']}")
    if result["failures"]:
        print("⚠️  Errors occurred:")
        for f in result["failures"]:
            print(f"  {f['name']} [{f['stage']}]: {f['reason']}")
        return 1

    print("\n✅ Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
