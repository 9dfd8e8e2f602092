"""Tests for report entries, renderers and report generation."""

from datetime import datetime
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from tabshaper.core import RenderError, ReportConfig, ToolkitConfig, UnsupportedOutputFormatError
from tabshaper.features.binning import binning
from tabshaper.features.missing import imputate_missing
from tabshaper.features.transforms import transform
from tabshaper.reporting import (
    BinningEntry,
    EntryKind,
    ErrorEntry,
    HtmlReportRenderer,
    ImputationEntry,
    PdfReportRenderer,
    Report,
    TransformEntry,
    TransformationReport,
    get_renderer,
)


@pytest.fixture
def quiet_config(tmp_path):
    config = ToolkitConfig()
    config.report.output_dir = str(tmp_path)
    config.report.plots = False
    config.binning.n_bins = 3
    return config


@pytest.fixture
def tiny_report(tmp_path):
    x = pd.Series([1.0, 2.0, np.nan, 4.0, 30.0], name='x')
    entries = (
        ImputationEntry('x', 'missing', imputate_missing(x.to_frame(), 'x')),
        TransformEntry('x', transform(x, 'log')),
        BinningEntry('x', binning(x, n_bins=2)),
        ErrorEntry('y', 'binning', 'UnsupportedMethodError', 'not numeric'),
    )
    return Report(
        title='Tiny',
        columns=('x', 'y'),
        entries=entries,
        shape=(5, 2),
        target=None,
        output_format='html',
        output_path=tmp_path / 'tiny.html',
        created_at=datetime(2024, 1, 1, 12, 0, 0),
    )


class TestEntries:

    def test_kinds_and_titles(self, tiny_report):
        kinds = [e.kind for e in tiny_report.entries]
        assert kinds == [EntryKind.IMPUTATION, EntryKind.TRANSFORM, EntryKind.BINNING, EntryKind.ERROR]
        assert 'mean' in tiny_report.entries[0].title
        assert 'log' in tiny_report.entries[1].title

    def test_entry_tables(self, tiny_report):
        for entry in tiny_report.entries:
            assert isinstance(entry.table(), pd.DataFrame)
        assert list(tiny_report.entries[2].table().columns) == ['levels', 'freq', 'rate']

    def test_error_from_exception(self):
        entry = ErrorEntry.from_exception('c', 'transform', ValueError('boom'))
        assert entry.error_type == 'ValueError'
        assert entry.message == 'boom'
        assert entry.kind is EntryKind.ERROR

    def test_report_queries(self, tiny_report):
        assert len(tiny_report.entries_for('x')) == 3
        assert len(tiny_report.of_kind('binning')) == 1
        assert [e.column for e in tiny_report.errors] == ['y']
        overview = tiny_report.overview()
        assert list(overview.columns) == ['column', 'kind', 'stage', 'detail']
        assert len(overview) == 4


class TestRenderers:

    def test_factory(self):
        assert isinstance(get_renderer('PDF'), PdfReportRenderer)
        assert isinstance(get_renderer('html'), HtmlReportRenderer)
        with pytest.raises(UnsupportedOutputFormatError):
            get_renderer('docx')

    def test_html(self, tiny_report, tmp_path):
        path = HtmlReportRenderer(ReportConfig(plots=True)).render(tiny_report, tmp_path / 'r.html')
        html = path.read_text(encoding='utf-8')
        assert html.startswith('<!DOCTYPE html>')
        assert 'Tiny' in html
        assert 'data:image/png;base64,' in html
        assert 'UnsupportedMethodError' in html

    def test_pdf(self, tiny_report, tmp_path):
        path = PdfReportRenderer(ReportConfig(plots=True)).render(tiny_report, tmp_path / 'sub' / 'r.pdf')
        assert path.exists()
        assert path.read_bytes().startswith(b'%PDF')

    def test_failed_render_leaves_no_file(self, tiny_report, tmp_path, monkeypatch):
        renderer = HtmlReportRenderer()

        def explode(report, path):
            Path(path).write_text('partial')
            raise OSError('disk full')

        monkeypatch.setattr(renderer, '_write', explode)
        target = tmp_path / 'out.html'
        with pytest.raises(RenderError):
            renderer.render(tiny_report, target)
        assert not target.exists()
        assert list(tmp_path.iterdir()) == []

    def test_existing_file_kept_on_failure(self, tiny_report, tmp_path, monkeypatch):
        target = tmp_path / 'out.html'
        target.write_text('previous')
        renderer = HtmlReportRenderer()

        def explode(report, path):
            raise ValueError('bad')

        monkeypatch.setattr(renderer, '_write', explode)
        with pytest.raises(RenderError):
            renderer.render(tiny_report, target)
        assert target.read_text() == 'previous'


class TestTransformationReport:

    def test_format_validated_first(self, sample_table, tmp_path):
        with pytest.raises(UnsupportedOutputFormatError):
            TransformationReport().generate(sample_table, target='nope', output_format='docx')
        assert list(tmp_path.iterdir()) == []

    def test_default_output_path(self, sample_table, quiet_config, tmp_path):
        report = TransformationReport(quiet_config).generate(sample_table, output_format='html')
        assert report.output_path == tmp_path / 'transformation_report.html'
        assert report.output_path.exists()

    def test_entries_follow_column_order(self, sample_table, quiet_config, tmp_path):
        report = TransformationReport(quiet_config).generate(
            sample_table, target='survived', output_format='html', output_path=tmp_path / 'r.html'
        )
        order = list(dict.fromkeys(e.column for e in report.entries))
        assert order == ['age', 'fare', 'sibsp', 'embarked']
        assert 'survived' not in order
        assert report.columns == ('age', 'fare', 'sibsp', 'embarked')

    def test_stages_per_column(self, sample_table, quiet_config, tmp_path):
        report = TransformationReport(quiet_config).generate(
            sample_table, target='survived', output_format='html', output_path=tmp_path / 'r.html'
        )
        age = [(e.kind, e.stage) for e in report.entries_for('age')]
        assert (EntryKind.IMPUTATION, 'missing') in age
        assert age[-1][0] is EntryKind.BINNING

        fare = report.entries_for('fare')
        assert any(e.kind is EntryKind.IMPUTATION and e.stage == 'outlier' for e in fare)
        assert any(e.kind is EntryKind.TRANSFORM for e in fare)
        optimal = [e for e in fare if e.kind is EntryKind.BINNING and e.result.is_optimal]
        assert len(optimal) == 1

        embarked = report.entries_for('embarked')
        assert [e.kind for e in embarked] == [EntryKind.IMPUTATION]

    def test_column_failure_becomes_error_entry(self, quiet_config, tmp_path):
        table = pd.DataFrame({
            'empty': [np.nan] * 6,
            'ok': [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
        })
        report = TransformationReport(quiet_config).generate(
            table, output_format='html', output_path=tmp_path / 'r.html'
        )
        assert [(e.column, e.stage) for e in report.errors] == [('empty', 'missing')]
        assert any(e.column == 'ok' and e.kind is EntryKind.BINNING for e in report.entries)

    def test_non_binary_target_skips_optimal_binning(self, sample_table, quiet_config, tmp_path):
        report = TransformationReport(quiet_config).generate(
            sample_table, target='sibsp', output_format='html', output_path=tmp_path / 'r.html'
        )
        assert not any(e.kind is EntryKind.BINNING and e.result.is_optimal for e in report.entries)
        assert not report.errors

    def test_parallel_matches_serial(self, credit_table, quiet_config, tmp_path):
        serial = TransformationReport(quiet_config).generate(
            credit_table, target='default', output_format='html', output_path=tmp_path / 'a.html'
        )
        quiet_config.report.n_jobs = 2
        parallel = TransformationReport(quiet_config).generate(
            credit_table, target='default', output_format='html', output_path=tmp_path / 'b.html'
        )
        assert [(e.column, e.kind, e.stage) for e in serial.entries] == \
            [(e.column, e.kind, e.stage) for e in parallel.entries]

    def test_input_not_mutated(self, sample_table, quiet_config, tmp_path):
        before = sample_table.copy()
        TransformationReport(quiet_config).generate(sample_table, output_format='html',
                                                    output_path=tmp_path / 'r.html')
        pd.testing.assert_frame_equal(sample_table, before)
