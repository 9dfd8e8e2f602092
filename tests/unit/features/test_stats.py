"""Tests for descriptive statistics, skewness detection and outlier detection."""

import numpy as np
import pandas as pd
import pytest
from scipy import stats

from tabshaper.core import UnsupportedMethodError
from tabshaper.features.outliers import OutlierDetector, diagnose_outliers
from tabshaper.features.stats import describe, describe_column, find_skewness, get_mode, skewness


@pytest.fixture
def skew_table():
    return pd.DataFrame({
        'right': [1, 1, 1, 2, 2, 3, 4, 10, 25, 60],
        'left': [1, 40, 52, 55, 57, 58, 58, 59, 60, 60],
        'flat': [5, 5, 5, 5, 5, 5, 5, 5, 5, 5],
        'label': list('abcdefghij'),
        'sym': [1, 2, 3, 4, 5, 6, 7, 8, 9, 10],
    })


class TestDescribeColumn:

    def test_numeric_statistics(self):
        s = pd.Series([10, 20, 30, np.nan, 50], name='x')
        desc = describe_column(s)

        assert desc.kind == "numeric"
        assert desc.n == 4 and desc.n_missing == 1
        assert desc.mean == pytest.approx(27.5)
        assert desc.median == pytest.approx(25.0)
        assert desc.sd == pytest.approx(np.std([10, 20, 30, 50], ddof=1))
        assert desc.to_dict()['variance'] == pytest.approx(np.var([10, 20, 30, 50], ddof=1))
        assert desc.quantiles["p00"] == 10 and desc.quantiles["p100"] == 50
        assert desc.missing_ratio == pytest.approx(0.2)

    def test_categorical_statistics(self):
        desc = describe_column(pd.Series(['a', 'b', 'b', None], name='c'))
        assert desc.kind == "categorical"
        assert desc.mode == 'b'
        assert desc.n_levels == 2
        assert desc.frequencies == {'b': 2, 'a': 1}
        assert "levels" in desc.to_dict()

    def test_describe_table(self, skew_table):
        table = describe(skew_table)
        assert list(table.index) == ['right', 'left', 'flat', 'sym']
        assert table.loc['sym', 'mean'] == pytest.approx(5.5)
        assert table.loc['sym', 'variance'] == pytest.approx(np.var(range(1, 11), ddof=1))

    def test_mode_ties_resolve_to_smallest(self):
        assert get_mode(pd.Series([3, 1, 3, 1, 2])) == 1
        assert np.isnan(get_mode(pd.Series([np.nan, np.nan])))


class TestSkewness:

    def test_population_moment(self):
        values = [1, 1, 1, 2, 2, 3, 4, 10, 25, 60]
        assert skewness(pd.Series(values)) == pytest.approx(stats.skew(values, bias=True))

    def test_constant_and_empty_are_nan(self):
        assert np.isnan(skewness(pd.Series([5, 5, 5])))
        assert np.isnan(skewness(pd.Series([np.nan, 1.0])))

    def test_find_names(self, skew_table):
        found = find_skewness(skew_table, index=False, thres=0.5)
        assert found == ['right', 'left']

    def test_find_positions(self, skew_table):
        assert find_skewness(skew_table, thres=0.5) == [0, 1]

    def test_find_values(self, skew_table):
        values = find_skewness(skew_table, index=False, value=True, thres=0.5)
        assert isinstance(values, pd.Series)
        assert list(values.index) == ['right', 'left']
        assert values['right'] > 0 > values['left']
        assert values['right'] == round(values['right'], 3)

    def test_default_threshold_flags_any_nonzero_skew(self, skew_table):
        names = find_skewness(skew_table, index=False)
        assert 'flat' not in names and 'label' not in names

    def test_table_is_not_modified(self, skew_table):
        before = skew_table.copy()
        find_skewness(skew_table, value=True)
        pd.testing.assert_frame_equal(skew_table, before)


class TestOutlierDetector:

    def test_iqr_detects_extreme_value(self):
        s = pd.Series([1, 2, 3, 4, 100])
        detector = OutlierDetector()
        lo, hi = detector.bounds(s)
        assert (lo, hi) == pytest.approx((-1.0, 7.0))
        np.testing.assert_array_equal(detector.detect(s), [4])

    def test_missing_values_are_never_outliers(self):
        s = pd.Series([1, 2, np.nan, 3, 4, 100])
        np.testing.assert_array_equal(OutlierDetector().detect(s), [5])

    def test_zscore_rule(self):
        s = pd.Series(list(range(20)) + [500])
        detector = OutlierDetector(rule="zscore")
        assert detector.coef == 3.0
        np.testing.assert_array_equal(detector.detect(s), [20])

    def test_custom_coef(self):
        s = pd.Series([1, 2, 3, 4, 9])
        assert OutlierDetector(coef=1.5).detect(s).size == 1
        assert OutlierDetector(coef=3.0).detect(s).size == 0

    def test_rejects_categorical_and_unknown_rule(self):
        with pytest.raises(UnsupportedMethodError):
            OutlierDetector().detect(pd.Series(['a', 'b']))
        with pytest.raises(UnsupportedMethodError):
            OutlierDetector(rule="mad")

    def test_diagnose(self):
        table = pd.DataFrame({'x': [1, 2, 3, 4, 100], 'c': list('abcde')})
        diag = diagnose_outliers(table)
        assert list(diag.index) == ['x']
        assert diag.loc['x', 'outliers_cnt'] == 1
        assert diag.loc['x', 'outliers_mean'] == 100
        assert diag.loc['x', 'without_mean'] == pytest.approx(2.5)
