"""
Shared fixtures for the tabshaper test suite.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
import yaml


@pytest.fixture
def sample_table():
    """Small mixed-type table with missing values and a binary target."""
    return pd.DataFrame({
        'age': [22.0, 38.0, np.nan, 35.0, np.nan, 54.0, 31.0, 2.0, 27.0, 14.0,
                41.0, 19.0, np.nan, 63.0, 30.0, 25.0, 47.0, 33.0, 8.0, 58.0],
        'fare': [7.25, 71.28, 7.92, 53.10, 8.05, 8.46, 51.86, 21.07, 11.13, 30.07,
                 16.70, 26.55, 8.05, 263.0, 7.85, 16.00, 29.12, 13.00, 18.00, 512.33],
        'sibsp': [1, 1, 0, 1, 0, 0, 0, 3, 0, 1, 1, 0, 0, 1, 0, 0, 1, 0, 4, 0],
        'embarked': ['S', 'C', 'S', 'S', np.nan, 'Q', 'S', 'S', 'S', 'C',
                     'S', np.nan, 'S', 'C', 'S', 'Q', 'S', 'S', 'S', 'C'],
        'survived': [0, 1, 1, 1, 0, 0, 0, 0, 1, 1, 0, 1, 0, 1, 0, 1, 0, 0, 0, 1],
    })


@pytest.fixture
def credit_table():
    """Larger seeded table for model-based imputation and optimal binning."""
    rng = np.random.default_rng(7)
    n = 400
    income = rng.lognormal(mean=10, sigma=0.6, size=n)
    age = rng.integers(18, 75, size=n).astype(float)
    score = 0.5 * (age - 18) / 57 + rng.normal(0, 0.15, size=n)
    default = (rng.random(n) < 1 / (1 + np.exp(-(3 * score - 1.5)))).astype(int)
    region = rng.choice(['north', 'south', 'east'], size=n, p=[0.5, 0.3, 0.2])
    table = pd.DataFrame({
        'income': income,
        'age': age,
        'score': score,
        'region': region,
        'default': default,
    })
    table.loc[rng.choice(n, 40, replace=False), 'income'] = np.nan
    table.loc[rng.choice(n, 25, replace=False), 'region'] = np.nan
    return table


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary working directory."""
    return tmp_path


@pytest.fixture
def report_config_file(tmp_path):
    """YAML report configuration without plots, for fast rendering."""
    config = {
        "logging_level": "WARNING",
        "report": {"title": "Test Report", "output_dir": str(tmp_path / "out"), "plots": False},
        "binning": {"n_bins": 4},
    }
    path = tmp_path / "report.yaml"
    with path.open("w") as f:
        yaml.safe_dump(config, f)
    return path
