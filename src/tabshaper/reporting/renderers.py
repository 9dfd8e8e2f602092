"""PDF and HTML renderers for transformation reports."""

from __future__ import annotations

import base64
import io
import os
import tempfile
from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type, Union

import matplotlib.pyplot as plt
import pandas as pd
from jinja2 import Environment, PackageLoader, select_autoescape
from matplotlib.backends.backend_pdf import PdfPages

from tabshaper.core.exceptions import RenderError, UnsupportedOutputFormatError
from tabshaper.core.interfaces import ReportRenderer
from tabshaper.core.utils import LoggerFactory, ReportConfig

if TYPE_CHECKING:
    from tabshaper.reporting.report import Report

_PAGE = (11.69, 8.27)  # A4 landscape, inches
_ROWS_PER_PAGE = 28


def _format_table(df: pd.DataFrame, digits: int = 4) -> pd.DataFrame:
    out = df.copy()
    for col in out.columns:
        if pd.api.types.is_float_dtype(out[col]):
            out[col] = out[col].round(digits)
    return out


class BaseReportRenderer(ReportRenderer):
    """Atomic write: render to a temporary file beside ``path``, then move it in place."""

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

    def render(self, report: "Report", path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=path.suffix, dir=path.parent)
        os.close(fd)
        tmp = Path(tmp_name)
        try:
            self._write(report, tmp)
            os.replace(tmp, path)
        except Exception as exc:
            tmp.unlink(missing_ok=True)
            raise RenderError(f"Failed to render {self.format} report to {path}: {exc}") from exc
        finally:
            plt.close("all")
        self.logger.info(f"Rendered {self.format} report to {path}")
        return path

    @abstractmethod
    def _write(self, report: "Report", path: Path) -> None:
        pass


class PdfReportRenderer(BaseReportRenderer):
    """One cover page, an overview table, then a table and a plot per entry."""

    format = "pdf"
    extension = "pdf"

    def _write(self, report: "Report", path: Path) -> None:
        with PdfPages(path) as pdf:
            pdf.savefig(self._cover(report))
            plt.close("all")
            for fig in self._table_pages(report.overview(), "Overview"):
                pdf.savefig(fig)
                plt.close(fig)
            for entry in report.entries:
                for fig in self._table_pages(_format_table(entry.table()), f"{entry.column}: {entry.title}"):
                    pdf.savefig(fig)
                    plt.close(fig)
                if self.config.plots and hasattr(entry, "result"):
                    fig = entry.result.plot()
                    pdf.savefig(fig)
                    plt.close(fig)
            info = pdf.infodict()
            info["Title"] = report.title
            info["CreationDate"] = report.created_at

    def _cover(self, report: "Report"):
        fig = plt.figure(figsize=_PAGE)
        lines = [
            f"Rows: {report.shape[0]}    Columns: {report.shape[1]}",
            f"Target: {report.target if report.target is not None else '-'}",
            f"Entries: {len(report.entries)}    Errors: {len(report.errors)}",
            f"Generated: {report.created_at:%Y-%m-%d %H:%M:%S}",
        ]
        fig.text(0.5, 0.65, report.title, ha="center", fontsize=24, weight="bold")
        for i, line in enumerate(lines):
            fig.text(0.5, 0.5 - i * 0.06, line, ha="center", fontsize=12)
        return fig

    def _table_pages(self, df: pd.DataFrame, title: str):
        df = df.reset_index() if not isinstance(df.index, pd.RangeIndex) else df
        chunks = [df.iloc[i:i + _ROWS_PER_PAGE] for i in range(0, max(len(df), 1), _ROWS_PER_PAGE)]
        for n, chunk in enumerate(chunks):
            fig, ax = plt.subplots(figsize=_PAGE)
            ax.axis("off")
            suffix = f" ({n + 1}/{len(chunks)})" if len(chunks) > 1 else ""
            ax.set_title(title + suffix, loc="left", fontsize=12)
            if not chunk.empty:
                cells = chunk.astype(str).to_numpy().tolist()
                table = ax.table(cellText=cells, colLabels=[str(c) for c in chunk.columns], loc="upper left")
                table.auto_set_font_size(False)
                table.set_fontsize(8)
                table.auto_set_column_width(list(range(len(chunk.columns))))
            yield fig


class HtmlReportRenderer(BaseReportRenderer):
    """Jinja2 page with tables and inline PNG plots."""

    format = "html"
    extension = "html"
    template_name = "report.html.j2"

    def __init__(self, config: Optional[ReportConfig] = None):
        super().__init__(config)
        self.env = Environment(
            loader=PackageLoader("tabshaper", "reporting/templates"),
            autoescape=select_autoescape(["html", "j2"]),
        )

    @staticmethod
    def _png(fig) -> str:
        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=90, bbox_inches="tight")
        plt.close(fig)
        return base64.b64encode(buf.getvalue()).decode("ascii")

    def _sections(self, report: "Report") -> List[Dict[str, Any]]:
        sections = []
        for column in report.columns:
            items = []
            for entry in report.entries_for(column):
                items.append({
                    "kind": entry.kind.value,
                    "title": entry.title,
                    "table": _format_table(entry.table()).to_html(classes="data", border=0, na_rep="NA"),
                    "image": self._png(entry.result.plot())
                    if self.config.plots and hasattr(entry, "result") else None,
                })
            sections.append({"column": str(column), "entries": items})
        return sections

    def _write(self, report: "Report", path: Path) -> None:
        html = self.env.get_template(self.template_name).render(
            title=report.title,
            report=report,
            overview=report.overview().to_html(classes="data", border=0, index=False),
            sections=self._sections(report),
        )
        path.write_text(html, encoding="utf-8")


RENDERERS: Dict[str, Type[BaseReportRenderer]] = {
    PdfReportRenderer.format: PdfReportRenderer,
    HtmlReportRenderer.format: HtmlReportRenderer,
}


def get_renderer(output_format: str, config: Optional[ReportConfig] = None) -> BaseReportRenderer:
    renderer_cls = RENDERERS.get(str(output_format).lower())
    if renderer_cls is None:
        raise UnsupportedOutputFormatError(
            f"Unsupported report format '{output_format}'; choose one of {sorted(RENDERERS)}"
        )
    return renderer_cls(config)
