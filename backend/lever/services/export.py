"""Tabular export of simulation snapshots."""
from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd

from lever.models.simulation import Datum


def datums_to_frame(datums: Sequence[Datum]) -> pd.DataFrame:
    """One row per snapshot: date, net worth, then one column per envelope."""
    rows = []
    for datum in datums:
        row = {"date": datum.date, "value": datum.value}
        row.update(datum.parts)
        row.update(datum.non_networth_parts)
        rows.append(row)
    if not rows:
        return pd.DataFrame(columns=["date", "value"])
    return pd.DataFrame(rows)


def write_csv(datums: Sequence[Datum], path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    datums_to_frame(datums).to_csv(path, index=False)
    return path
