"""Render a structured chart analysis as readable markdown-ish text."""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ValidationError

from ..entities import ChartAnalysis
from ...exceptions import FormattingError

DEFAULT_HEADINGS = {
    "summary": "Prose summary",
    "snapshot": "Chart snapshot",
    "trends": "Main trends",
    "comparisons": "Comparisons",
    "outliers": "Notable outliers",
    "insights": "Insights",
    "risks": "Risks & limitations",
    "actions": "Recommended actions",
    "assumptions": "Assumptions",
    "questions": "Follow-up questions",
    "json": "JSON block",
}

_WHITESPACE = re.compile(r"\s+")
_BLANK_RUNS = re.compile(r"\n{3,}")


@dataclass
class FormatOptions:
    max_bullets_per_section: int = 6
    include_empty_sections: bool = False
    # partial overrides, merged over DEFAULT_HEADINGS
    headings: Dict[str, str] = field(default_factory=dict)

    def heading(self, key: str) -> str:
        return self.headings.get(key) or DEFAULT_HEADINGS[key]


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _clean(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _uniq(items: Optional[List[Any]]) -> List[Any]:
    if not items:
        return []
    seen = set()
    unique = []
    for item in items:
        payload = item.model_dump(by_alias=True) if isinstance(item, BaseModel) else item
        key = json.dumps(payload, sort_keys=True, default=str)
        if key not in seen:
            seen.add(key)
            unique.append(item)
    return unique


def _limit(items: List[Any], n: int) -> List[Any]:
    return items[:max(0, n)]


def format_number(value: float) -> str:
    """Thousands separators and at most two fraction digits."""
    text = f"{value:,.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _format_value(value: Union[float, int, str], unit: Optional[str] = None) -> str:
    if isinstance(value, (int, float)):
        core = format_number(value)
        return f"{core} {unit}" if unit and unit != "%" else core
    return _clean(value)


def _bullets(lines: List[str]) -> str:
    return "\n".join(f"• {_clean(line)}" for line in lines)


def _section(title: str, lines: List[str], opts: FormatOptions) -> str:
    if lines:
        return f"{title}\n\n{_bullets(lines)}\n"
    if opts.include_empty_sections:
        return f"{title}\n\n• Not available\n"
    return ""


def _render_snapshot(a: ChartAnalysis, opts: FormatOptions) -> List[str]:
    lines = []
    if not _is_blank(a.chart_type):
        lines.append(f"Type: {a.chart_type}")
    if a.metric and not _is_blank(a.metric.name):
        unit = f" ({a.metric.unit})" if a.metric.unit else ""
        lines.append(f"Metric: {a.metric.name}{unit}")
    if a.timeframe:
        parts = [
            f"start {a.timeframe.start}" if a.timeframe.start else "",
            f"end {a.timeframe.end}" if a.timeframe.end else "",
            a.timeframe.frequency or "",
        ]
        timeframe = " • ".join(p for p in parts if p)
        if timeframe:
            lines.append(f"Timeframe: {timeframe}")
    for kv in _limit(_uniq(a.key_values), opts.max_bullets_per_section):
        where = f" ({kv.where_in_chart})" if kv.where_in_chart else ""
        lines.append(f"{kv.label}: {_format_value(kv.value, kv.unit)}{where}")
    return lines


def _render_comparisons(a: ChartAnalysis, opts: FormatOptions) -> List[str]:
    lines = []
    for c in _limit(_uniq(a.comparisons), opts.max_bullets_per_section):
        deltas = []
        if c.delta_abs is not None:
            deltas.append(format_number(c.delta_abs))
        if c.delta_pct is not None:
            deltas.append(f"{format_number(c.delta_pct)}%")
        delta = f" ({' / '.join(deltas)})" if deltas else ""
        lines.append(f"{c.type}: {c.from_} → {c.to}{delta}")
    return lines


def _render_outliers(a: ChartAnalysis, opts: FormatOptions) -> List[str]:
    lines = []
    for o in _limit(_uniq(a.outliers), opts.max_bullets_per_section):
        parts = [p for p in (o.point, o.reason, o.impact) if not _is_blank(p)]
        lines.append(" — ".join(_clean(p) for p in parts))
    return lines


def _render_list(items: Optional[List[str]], opts: FormatOptions) -> List[str]:
    return [_clean(item) for item in _limit(_uniq(items), opts.max_bullets_per_section)]


def format_analysis_markdown(
    analysis: Union[ChartAnalysis, Dict[str, Any]],
    options: Optional[FormatOptions] = None
) -> str:
    """Format a chart analysis into titled bullet sections plus a trailing JSON block."""
    if not isinstance(analysis, ChartAnalysis):
        try:
            analysis = ChartAnalysis.model_validate(analysis)
        except ValidationError as e:
            raise FormattingError(
                message="Analysis does not match the expected structure",
                details={"errors": e.errors(include_url=False)}
            ) from e
    opts = options or FormatOptions()

    parts = []
    if not _is_blank(analysis.prose_summary):
        parts.append(f"{opts.heading('summary')}\n\n{_clean(analysis.prose_summary)}\n")

    parts.append(_section(opts.heading("snapshot"), _render_snapshot(analysis, opts), opts))
    parts.append(_section(opts.heading("trends"), _render_list(analysis.main_trends, opts), opts))
    parts.append(_section(opts.heading("comparisons"), _render_comparisons(analysis, opts), opts))
    parts.append(_section(opts.heading("outliers"), _render_outliers(analysis, opts), opts))
    parts.append(_section(opts.heading("insights"), _render_list(analysis.insights, opts), opts))
    parts.append(_section(opts.heading("risks"), _render_list(analysis.risks_or_limitations, opts), opts))
    parts.append(_section(opts.heading("actions"), _render_list(analysis.recommended_actions, opts), opts))
    parts.append(_section(opts.heading("assumptions"), _render_list(analysis.assumptions, opts), opts))
    parts.append(_section(opts.heading("questions"), _render_list(analysis.follow_up_questions, opts), opts))

    payload = analysis.model_dump(by_alias=True, exclude_none=True)
    if payload:
        block = json.dumps(payload, indent=2, ensure_ascii=False)
        parts.append(f"{opts.heading('json')}\n\n```json\n{block}\n```\n")

    return _BLANK_RUNS.sub("\n\n", "\n".join(p for p in parts if p))
