"""ReportExporter — text/Markdown/JSON/CSV/HTML export of compliance reports."""

from __future__ import annotations

import csv
import html
import io
import json
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

from daritana.compliance.clauses import Severity
from daritana.compliance.report import ComplianceReport
from daritana.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

# Requested format -> rendered format
_FORMAT_ALIASES: dict[str, str] = {
    "text": "text",
    "txt": "text",
    "pdf": "text",
    "markdown": "markdown",
    "md": "markdown",
    "json": "json",
    "csv": "csv",
    "excel": "csv",
    "xlsx": "csv",
    "html": "html",
}

CONTENT_TYPES: dict[str, str] = {
    "text": "text/plain",
    "markdown": "text/markdown",
    "json": "application/json",
    "csv": "text/csv",
    "html": "text/html",
}

_CSV_FIELDS = ["report_id", "project_id", "compliance_score", "clause_id", "severity", "description", "required_action"]


def resolve_format(fmt: str) -> str:
    """Map a requested format (``pdf``, ``excel``, ``md``, ...) to a renderer."""
    key = (fmt or "text").strip().lower()
    if key not in _FORMAT_ALIASES:
        raise InvalidInputError(
            f"Unsupported export format {fmt!r}; expected one of {', '.join(sorted(_FORMAT_ALIASES))}."
        )
    return _FORMAT_ALIASES[key]


@contextmanager
def open_writer(path: str | Path) -> Iterator[IO[bytes]]:
    """Open a binary writer that replaces *path* atomically on success.

    The temporary file is always closed, and removed if the block raises.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(f".{target.name}.tmp")
    fh = open(tmp, "wb")
    try:
        yield fh
    except BaseException:
        fh.close()
        tmp.unlink(missing_ok=True)
        raise
    else:
        fh.close()
        os.replace(tmp, target)


class ReportExporter:
    """Render compliance reports as downloadable artifacts."""

    def export(self, report: ComplianceReport, fmt: str = "text") -> bytes:
        """Render *report* in *fmt* and return UTF-8 encoded bytes."""
        kind = resolve_format(fmt)
        if kind == "text":
            content = report.to_text()
        elif kind == "markdown":
            content = report.to_markdown()
        elif kind == "json":
            content = self.export_json(report)
        elif kind == "csv":
            content = self.export_csv(report)
        else:
            content = self.export_html(report)
        return content.encode("utf-8")

    def write(self, report: ComplianceReport, path: str | Path, fmt: str = "text") -> Path:
        """Render *report* and write it to *path*. Returns the path."""
        payload = self.export(report, fmt)
        target = Path(path)
        with open_writer(target) as fh:
            fh.write(payload)
        logger.info("Exported report %s to %s (%d bytes)", report.id, target, len(payload))
        return target

    def export_json(self, report: ComplianceReport) -> str:
        """Export the report as structured JSON."""
        return json.dumps({"report": report.model_dump(mode="json")}, indent=2)

    def export_csv(self, report: ComplianceReport) -> str:
        """Export one row per violation; a report without violations gets a single summary row."""
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=_CSV_FIELDS)
        writer.writeheader()
        base = {
            "report_id": report.id,
            "project_id": report.project_id,
            "compliance_score": report.compliance_score,
        }
        if not report.violations:
            writer.writerow(base)
        for v in report.violations:
            writer.writerow({
                **base,
                "clause_id": v.clause_id,
                "severity": Severity(v.severity).value,
                "description": v.description,
                "required_action": v.required_action,
            })
        return buf.getvalue()

    def export_html(self, report: ComplianceReport) -> str:
        """Export the report as standalone HTML."""
        rows = ""
        for v in report.violations:
            rows += (
                f"<tr><td>{html.escape(v.clause_id)}</td>"
                f"<td>{Severity(v.severity).value}</td>"
                f"<td>{html.escape(v.description)}</td></tr>"
            )
        recs = "".join(f"<li>{html.escape(r)}</li>" for r in report.recommendations)
        valid = report.valid_until.strftime("%Y-%m-%d") if report.valid_until else "N/A"

        return (
            "<!DOCTYPE html><html><head><meta charset='utf-8'>"
            "<title>UBBL Compliance Report</title>"
            "<style>body{font-family:sans-serif;margin:20px;}table{border-collapse:collapse;}"
            "th,td{border:1px solid #ddd;padding:8px;}th{background:#f5f5f5;}</style>"
            f"</head><body><h1>UBBL Compliance Report</h1>"
            f"<p>Project: {html.escape(report.project_id)}<br>"
            f"Score: {report.compliance_score}%<br>"
            f"Applicable clauses: {report.applicable_clauses} of {report.total_clauses}<br>"
            f"Valid until: {valid}</p>"
            f"<h2>Violations ({len(report.violations)})</h2>"
            "<table><tr><th>Clause</th><th>Severity</th><th>Description</th></tr>"
            f"{rows}</table>"
            f"<h2>Recommendations</h2><ul>{recs}</ul></body></html>"
        )
