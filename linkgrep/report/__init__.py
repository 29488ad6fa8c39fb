# File: linkgrep/report/__init__.py
"""linkgrep.report: match output for the terminal plus JSON and HTML report files."""

from __future__ import annotations

from .emitter import ReportEmitter, format_match
from .html_report import render_html
from .json_report import render_json

__all__ = ["ReportEmitter", "format_match", "render_html", "render_json"]
