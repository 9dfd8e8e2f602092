from __future__ import annotations
from typing import Dict, Any, Tuple
import pandas as pd


class ImputationReport:
    """Holds one summary row per imputed (column, scope) pair."""

    def __init__(self):
        self.rows: Dict[Tuple[str, str], Dict[str, Any]] = {}

    def init_row(self, column: str, scope: str, method: str, affected_rate: float, fit_rows: int):
        self.rows[(column, scope)] = {
            "method": method,
            "affected_rate": affected_rate,
            "fit_rows": fit_rows,
        }

    def update(self, column: str, scope: str, extra: Dict[str, Any]):
        if (column, scope) in self.rows:
            self.rows[(column, scope)].update(extra)

    def to_df(self) -> pd.DataFrame:
        if not self.rows:
            return pd.DataFrame()
        df = pd.DataFrame.from_dict(self.rows, orient="index")
        df.index = pd.MultiIndex.from_tuples(df.index, names=["column", "scope"])
        return df
