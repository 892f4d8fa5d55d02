"""
Report serializers for ExperimentReport.

Markdown, LaTeX, JSON, and HTML renderings of the same report. All four
are pure functions of the report and tolerate missing optional fields.
"""

from __future__ import annotations

import html
import json
import re

from pathrank.evaluation.runner import ExperimentReport, MethodResult, StatisticalTestResult

_AT_K = re.compile(r"^(precision|recall)_at_(\d+)$")


def format_metric_name(metric: str) -> str:
    """'precision_at_5' -> 'PRECISION@5', 'ndcg' -> 'Ndcg'."""
    match = _AT_K.match(metric)
    if match:
        return f"{match.group(1).upper()}@{match.group(2)}"
    return metric[:1].upper() + metric[1:]


def _metric_columns(methods: list[MethodResult]) -> list[str]:
    columns: dict[str, None] = {}
    for method in methods:
        for metric in method.results:
            columns.setdefault(metric, None)
    return list(columns)


def _md_cell(text: str) -> str:
    """Escape pipes so a value stays inside its Markdown table cell."""
    return text.replace("|", r"\|")


def _comparison(test: StatisticalTestResult) -> str:
    return " vs ".join(test.methods)


def _interpretation(report: ExperimentReport) -> str:
    if not report.methods:
        return "No methods were evaluated."
    lines = [f"{report.winner} achieved the best mean score across the reported metrics."]
    if report.statistical_tests:
        significant = sum(1 for t in report.statistical_tests if t.significant)
        lines.append(
            f"{significant} of {len(report.statistical_tests)} statistical tests "
            f"showed a significant difference."
        )
    else:
        lines.append("No statistical tests were run.")
    return " ".join(lines)


# =============================================================================
# Markdown
# =============================================================================

def generate_markdown_report(report: ExperimentReport) -> str:
    """Markdown report with winner, performance table, and tests."""
    lines = [
        f"# {report.name}",
        "",
        f"**Timestamp:** {report.timestamp}",
        f"**Graph Spec:** {report.graph_spec}",
    ]
    if report.duration is not None:
        lines.append(f"**Duration:** {report.duration:.0f}ms")

    lines += ["", "## Winner", "", f"**{report.winner}**", "", "## Method Performance", ""]

    columns = _metric_columns(report.methods)
    header = ["Method", *(format_metric_name(c) for c in columns), "Runtime (ms)"]
    lines.append("| " + " | ".join(header) + " |")
    lines.append("|" + "|".join("---" for _ in header) + "|")
    for method in report.methods:
        cells = [_md_cell(method.method)]
        cells += [f"{method.results[c]:.4f}" if c in method.results else "-" for c in columns]
        cells.append(f"{method.runtime_ms:.2f}")
        lines.append("| " + " | ".join(cells) + " |")

    lines += ["", "## Statistical Tests", ""]
    if report.statistical_tests:
        lines.append("| Test | Comparison | p-value | Significant | Statistic |")
        lines.append("|---|---|---|---|---|")
        for test in report.statistical_tests:
            p_value = test.corrected_p_value if test.corrected_p_value is not None else test.p_value
            lines.append(
                f"| {_md_cell(test.type)} | {_md_cell(_comparison(test))} | {p_value:.4f} | "
                f"{'Yes' if test.significant else 'No'} | {test.statistic:.4f} |"
            )
    else:
        lines.append("No statistical tests were run.")

    lines += ["", "## Interpretation", "", _interpretation(report), ""]
    return "\n".join(lines)


# =============================================================================
# LaTeX
# =============================================================================

_LATEX_SPECIAL = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


def escape_latex(text: str) -> str:
    return "".join(_LATEX_SPECIAL.get(ch, ch) for ch in text)


def generate_latex_table(report: ExperimentReport) -> str:
    """booktabs table of per-method metric means; the winner is bold."""
    columns = _metric_columns(report.methods)
    lines = [
        r"\begin{table}[h]",
        r"\centering",
        r"\begin{tabular}{l" + "r" * len(columns) + "}",
        r"\toprule",
        " & ".join(["Method", *(escape_latex(format_metric_name(c)) for c in columns)]) + r" \\",
        r"\midrule",
    ]
    for method in report.methods:
        name = escape_latex(method.method)
        if method.method == report.winner:
            name = rf"\textbf{{{name}}}"
        cells = [f"{method.results[c]:.4f}" if c in method.results else "-" for c in columns]
        lines.append(" & ".join([name, *cells]) + r" \\")
    lines += [
        r"\bottomrule",
        r"\end{tabular}",
        rf"\caption{{Results for {escape_latex(report.name)}}}",
        rf"\label{{tab:{re.sub(r'[^a-z0-9]+', '-', report.name.lower()).strip('-')}}}",
        r"\end{table}",
    ]
    return "\n".join(lines)


# =============================================================================
# JSON
# =============================================================================

def generate_json_summary(report: ExperimentReport) -> str:
    """JSON summary (indent=2)."""
    data = {
        "name": report.name,
        "graphSpec": report.graph_spec,
        "timestamp": report.timestamp,
        "duration": report.duration,
        "winner": report.winner,
        "methods": [
            {"name": m.method, "results": dict(m.results), "runtime": m.runtime_ms}
            for m in report.methods
        ],
        "statisticalTests": [
            {
                "type": t.type,
                "comparison": _comparison(t),
                "methods": list(t.methods),
                "metric": t.metric,
                "pValue": t.p_value,
                "correctedPValue": t.corrected_p_value,
                "significant": t.significant,
                "statistic": t.statistic,
            }
            for t in report.statistical_tests
        ],
    }
    return json.dumps(data, indent=2)


# =============================================================================
# HTML
# =============================================================================

_CSS = """
body { font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif; margin: 2rem; color: #222; }
table { border-collapse: collapse; margin: 1rem 0; }
th, td { border: 1px solid #ccc; padding: 0.4rem 0.8rem; text-align: right; }
th:first-child, td:first-child { text-align: left; }
th { background: #f4f4f4; }
.winner { font-weight: bold; background: #eef8ee; }
.significant { color: #1a7f37; font-weight: bold; }
.not-significant { color: #888; }
.meta { color: #555; }
"""


def generate_html_report(report: ExperimentReport) -> str:
    """Standalone HTML page; every report string is HTML-escaped."""
    esc = html.escape
    columns = _metric_columns(report.methods)

    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{esc(report.name)}</title>",
        f"<style>{_CSS}</style>",
        "</head>",
        "<body>",
        f"<h1>{esc(report.name)}</h1>",
        '<p class="meta">',
        f"<strong>Timestamp:</strong> {esc(report.timestamp)}<br>",
        f"<strong>Graph Spec:</strong> {esc(report.graph_spec)}",
    ]
    if report.duration is not None:
        parts.append(f"<br><strong>Duration:</strong> {report.duration:.0f}ms")
    parts += [
        "</p>",
        "<h2>Winner</h2>",
        f'<p style="font-weight: bold">{esc(report.winner)}</p>',
        "<h2>Method Performance</h2>",
        "<table>",
        "<tr><th>Method</th>"
        + "".join(f"<th>{esc(format_metric_name(c))}</th>" for c in columns)
        + "<th>Runtime (ms)</th></tr>",
    ]
    for method in report.methods:
        row_class = ' class="winner"' if method.method == report.winner else ""
        cells = "".join(
            f"<td>{method.results[c]:.4f}</td>" if c in method.results else "<td>-</td>"
            for c in columns
        )
        parts.append(
            f"<tr{row_class}><td>{esc(method.method)}</td>{cells}"
            f"<td>{method.runtime_ms:.2f}</td></tr>"
        )
    parts.append("</table>")

    parts.append("<h2>Statistical Tests</h2>")
    if report.statistical_tests:
        parts += [
            "<table>",
            "<tr><th>Test</th><th>Comparison</th><th>p-value</th><th>Significant</th><th>Statistic</th></tr>",
        ]
        for test in report.statistical_tests:
            css = "significant" if test.significant else "not-significant"
            p_value = test.corrected_p_value if test.corrected_p_value is not None else test.p_value
            parts.append(
                f'<tr class="{css}"><td>{esc(test.type)}</td><td>{esc(_comparison(test))}</td>'
                f"<td>{p_value:.4f}</td><td>{'Yes' if test.significant else 'No'}</td>"
                f"<td>{test.statistic:.4f}</td></tr>"
            )
        parts.append("</table>")
    else:
        parts.append("<p>No statistical tests were run.</p>")

    parts += [
        "<h2>Interpretation</h2>",
        f"<p>{esc(_interpretation(report))}</p>",
        "</body>",
        "</html>",
    ]
    return "\n".join(parts)
