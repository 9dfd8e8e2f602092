"""Before/after plots for imputation, transformation and binning results."""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns

if TYPE_CHECKING:
    from tabshaper.features.binning.bins import Bins
    from tabshaper.features.missing.result import ImputationResult
    from tabshaper.features.transforms.transformer import TransformResult

_FIGSIZE = (10, 4)


def _density(ax, values: pd.Series, label: str, color: str) -> None:
    values = pd.to_numeric(values, errors="coerce")
    values = values[np.isfinite(values)]
    if values.nunique() > 1:
        sns.kdeplot(x=values.to_numpy(), ax=ax, label=label, color=color, fill=True,
                    alpha=0.3, warn_singular=False)
    elif not values.empty:
        ax.axvline(float(values.iloc[0]), label=label, color=color)


def plot_imputation(result: "ImputationResult", title: Optional[str] = None):
    """Density of original vs imputed values, or level counts for categoricals."""
    fig, ax = plt.subplots(figsize=_FIGSIZE)
    if result.is_numeric:
        _density(ax, result.original, "Original", "tab:blue")
        _density(ax, result.imputed, "Imputation", "tab:orange")
        ax.set_ylabel("density")
    else:
        counts = pd.DataFrame({
            "Original": result.original.value_counts(dropna=False),
            "Imputation": result.imputed.value_counts(dropna=False),
        }).fillna(0)
        counts.index = counts.index.map(lambda v: "<NA>" if pd.isna(v) else str(v))
        counts.plot.bar(ax=ax, rot=0)
        ax.set_ylabel("count")
    ax.set_xlabel(result.column)
    ax.set_title(title or f"{result.column}: {result.kind} imputation ({result.method})")
    ax.legend()
    fig.tight_layout()
    return fig


def plot_transform(result: "TransformResult", title: Optional[str] = None):
    fig, (ax_before, ax_after) = plt.subplots(1, 2, figsize=_FIGSIZE)
    for ax, values, label in ((ax_before, result.original, "Original"),
                              (ax_after, result.transformed, result.method)):
        finite = pd.to_numeric(values, errors="coerce")
        finite = finite[np.isfinite(finite)]
        sns.histplot(x=finite.to_numpy(), ax=ax, kde=finite.nunique() > 1, color="tab:blue")
        ax.set_title(label)
        ax.set_xlabel(result.column)
    fig.suptitle(title or f"{result.column}: {result.method} transformation")
    fig.tight_layout()
    return fig


def plot_bins(bins: "Bins", title: Optional[str] = None):
    """Frequency per interval; optimal bins also show the event rate."""
    summary = bins.summary()
    fig, ax = plt.subplots(figsize=_FIGSIZE)
    sns.barplot(x=summary["levels"].astype(str), y=summary["freq"], ax=ax, color="tab:blue")
    ax.set_xlabel(bins.column)
    ax.set_ylabel("frequency")
    ax.tick_params(axis="x", labelrotation=30)
    if bins.iv_table is not None:
        rates = bins.iv_table.loc[bins.iv_table["bin"].isin(bins.labels), "event_rate"]
        ax2 = ax.twinx()
        ax2.plot(range(len(rates)), rates.to_numpy(), color="tab:red", marker="o")
        ax2.set_ylabel("event rate")
    ax.set_title(title or f"{bins.column}: {bins.type} binning")
    fig.tight_layout()
    return fig
