"""Cluster-based breakpoints for 1-D binning (k-means and bagged clustering)."""

from __future__ import annotations

import numpy as np
from sklearn.cluster import AgglomerativeClustering, KMeans


def _group_breaks(values: np.ndarray, groups: np.ndarray) -> np.ndarray:
    """Edges at the maximum of every group but the highest, ordered by group mean."""
    order = sorted(np.unique(groups), key=lambda g: values[groups == g].mean())
    inner = [values[groups == g].max() for g in order[:-1]]
    return np.unique(np.concatenate([[values.min()], inner, [values.max()]]))


def kmeans_breaks(values: np.ndarray, n_bins: int, seed: int = 42) -> np.ndarray:
    values = np.asarray(values, dtype=float)
    k = min(n_bins, np.unique(values).size)
    if k < 2:
        return np.unique(values)
    km = KMeans(n_clusters=k, n_init=10, random_state=seed)
    groups = km.fit_predict(values.reshape(-1, 1))
    return _group_breaks(values, groups)


def bclust_breaks(
    values: np.ndarray,
    n_bins: int,
    seed: int = 42,
    n_bootstrap: int = 10,
    base_centers: int = 20,
) -> np.ndarray:
    """
    Bagged clustering: k-means with ``base_centers`` centres on each of
    ``n_bootstrap`` bootstrap samples, Ward clustering of the pooled centres
    into ``n_bins`` groups, then every value joins the group of its nearest
    centre.
    """
    values = np.asarray(values, dtype=float)
    if min(n_bins, np.unique(values).size) < 2:
        return np.unique(values)

    rng = np.random.default_rng(seed)
    centers = []
    for b in range(n_bootstrap):
        sample = rng.choice(values, size=values.size, replace=True)
        k = min(base_centers, np.unique(sample).size)
        km = KMeans(n_clusters=k, n_init=1, random_state=seed + b).fit(sample.reshape(-1, 1))
        centers.append(km.cluster_centers_.ravel())
    pooled = np.unique(np.concatenate(centers))

    k = min(n_bins, pooled.size)
    if k < 2:
        return np.unique(values)
    center_groups = AgglomerativeClustering(n_clusters=k, linkage="ward").fit_predict(pooled.reshape(-1, 1))
    nearest = np.abs(values[:, None] - pooled[None, :]).argmin(axis=1)
    return _group_breaks(values, center_groups[nearest])
