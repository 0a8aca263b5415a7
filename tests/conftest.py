"""Test configuration — ensure velocity_max is importable + shared CSV fixtures."""
import sys
from pathlib import Path

import pytest

# Add project root to path so `from velocity_max.xxx import` works
sys.path.insert(0, str(Path(__file__).parent.parent))

HEADER = "Name,Set ID,Weight (lbs),Rep Count,Avg Mean Velocity (m/s),Notes\n"


@pytest.fixture
def write_csv(tmp_path):
    """Write tracker-style rows [(name, set_id, weight, reps, velocity), ...] to a CSV."""
    def _write(rows, filename="sets.csv", header=HEADER):
        lines = [header]
        for name, set_id, weight, reps, velocity in rows:
            lines.append(f"{name},{set_id},{weight},{reps},{velocity},\n")
        path = tmp_path / filename
        path.write_text("".join(lines))
        return path
    return _write


@pytest.fixture
def team_csv(write_csv):
    """Two fit-able athletes, one single-set athlete, one flat-velocity athlete."""
    return write_csv([
        ("Jane Doe", 1, 100, 3, 0.60),
        ("Jane Doe", 2, 120, 3, 0.45),
        ("Jane Doe", 3, 140, 2, 0.30),
        ("John Roe", 4, 135, 3, 0.70),
        ("John Roe", 5, 185, 3, 0.52),
        ("John Roe", 6, 225, 2, 0.38),
        ("John Roe", 7, 225, 1, 0.36),   # duplicate weight — dropped
        ("Solo Set", 8, 150, 3, 0.50),
        ("Flat Line", 9, 100, 3, 0.40),
        ("Flat Line", 10, 110, 3, 0.40),
    ])
