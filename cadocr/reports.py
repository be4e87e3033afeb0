"""Markdown reports for multi-page drawing analyses and dialog histories."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_BACK_TO_TOP = "**[返回顶部](#-cad-图纸-pdf-分析报告)**"
_VERSION_LINE = "> 版本号：v0.10.0"

PageResult = Tuple[str, Union[str, BaseException]]


@dataclass
class ChatMessage:
    """One message of a dialog: its role, its text and any attached images."""

    role: str
    content: str
    images: Optional[List[str]] = None


def page_number(page_id: str) -> str:
    """Return the page part of a ``path:page`` identifier."""
    return page_id.rsplit(":", 1)[-1]


def _write_lines(output_path: Union[str, os.PathLike], lines: Iterable[str]) -> None:
    text = "".join(f"{line}\n" for line in lines)
    with open(Path(output_path), "w", encoding="utf-8") as handle:
        handle.write(text)


def _is_failure(result: Union[str, BaseException]) -> bool:
    return isinstance(result, BaseException)


def export_pdf_report(
    page_results: Sequence[PageResult],
    summary_content: Optional[str],
    output_path: Union[str, os.PathLike],
    now: Optional[datetime] = None,
) -> None:
    """Write a Markdown report of per-page results and an optional summary.

    Each page result pairs a page identifier with either the analysis text
    or the exception that made the page fail.
    """
    results = list(page_results)
    now = now or datetime.now()

    success_count = sum(1 for _, result in results if not _is_failure(result))
    failed_count = len(results) - success_count
    success_rate = success_count / len(results) * 100.0 if results else 0.0

    lines: List[str] = [
        "# 📊 CAD 图纸 PDF 分析报告",
        "",
        f"**生成时间**: {now.strftime(_TIME_FORMAT)}",
        f"**总页数**: {len(results)}",
        "",
        "## 📈 处理统计",
        "",
        "| 指标 | 数值 |",
        "|------|------|",
        f"| 总页数 | {len(results)} |",
        f"| 成功 | {success_count} |",
        f"| 失败 | {failed_count} |",
        f"| 成功率 | {success_rate:.1f}% |",
        "",
        "## 📑 目录",
        "",
    ]

    if failed_count:
        lines.append("1. [⚠️ 失败的页面](#-失败的页面)")
    lines.append("2. [单页分析结果](#单页分析结果)")
    for page_id, _ in results:
        num = page_number(page_id)
        lines.append(f"   - [第 {num} 页](#第-{num}-页)")
    if summary_content is not None:
        lines.append("3. [📄 跨页汇总分析](#-跨页汇总分析)")
    lines.append("")

    if failed_count:
        lines += ["---", "## ⚠️ 失败的页面", ""]
        lines += [
            f"- **第 {page_number(page_id)} 页**: {result}"
            for page_id, result in results
            if _is_failure(result)
        ]
        lines.append("")

    lines += ["---", "## 单页分析结果", ""]
    for page_id, result in results:
        lines += [f"### 第 {page_number(page_id)} 页", ""]
        lines.append(f"*分析失败：{result}*" if _is_failure(result) else str(result))
        lines += ["", _BACK_TO_TOP, ""]

    if summary_content is not None:
        lines += ["---", "## 📄 跨页汇总分析", "", summary_content, "", _BACK_TO_TOP, ""]

    lines += ["---", "", "*报告由 CAD 图纸识别系统自动生成*", _VERSION_LINE]

    _write_lines(output_path, lines)


def export_dialog_history(
    history: Sequence[ChatMessage],
    output_path: Union[str, os.PathLike],
    model: str,
    client_name: str,
    drawing_type: str,
    now: Optional[datetime] = None,
) -> None:
    """Write a dialog history as Markdown, one section per message."""
    now = now or datetime.now()
    lines: List[str] = [
        "# 💬 对话历史记录",
        "",
        f"**导出时间**: {now.strftime(_TIME_FORMAT)}",
        f"**模型**: {model}",
        f"**模式**: {client_name}",
        f"**图纸类型**: {drawing_type}",
        "",
        "---",
        "",
    ]

    for idx, msg in enumerate(history):
        round_no = (idx + 1) // 2
        if msg.role == "system":
            lines += ["### 🔧 系统提示", "", "```", msg.content, "```", ""]
        elif msg.role == "user":
            lines += [f"### 👤 用户 (第 {round_no} 轮)", "", msg.content]
            if msg.images:
                lines += ["", f"**附加图片**: {len(msg.images)} 张"]
            lines.append("")
        elif msg.role == "assistant":
            lines += [f"### 🤖 AI (第 {round_no} 轮)", "", msg.content, ""]
        lines += ["---", ""]

    lines += ["*对话历史由 CAD 图纸识别系统导出*", _VERSION_LINE]

    _write_lines(output_path, lines)