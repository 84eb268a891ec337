"""
Printable Budget Report

Renders the whole ledger as one Markdown document for printing or PDF
export: header, totals, goal progress, per-category table, the full
ledger and signature blocks for the committee.

Presentation only. Every number comes from the aggregation functions.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Optional

from phapa_ledger.aggregation import (
    affordable_units,
    category_breakdown,
    goal_progress,
    summarize,
)
from phapa_ledger.config import LedgerSettings, get_settings
from phapa_ledger.models.entry import Entry, format_amount, thai_display_date

SIGNATORIES = (
    "ผู้จัดทำบัญชี",       # bookkeeper
    "เหรัญญิก",            # treasurer
    "ประธานคณะกรรมการ",    # committee chair
)


def _cell(text: str) -> str:
    """Make text safe inside a Markdown table cell."""
    return text.replace("|", "\\|").replace("\n", " ")


def render_report(
    entries: Sequence[Entry],
    settings: Optional[LedgerSettings] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render the report. Entries are listed in the order given."""
    settings = settings or get_settings().ledger
    generated_at = generated_at or datetime.now(timezone.utc)
    currency = settings.currency_label

    summary = summarize(entries)
    progress = goal_progress(summary.balance, settings.goal_target)
    units = affordable_units(summary.balance, settings.unit_price)

    lines = [
        f"# รายงานสรุปงบประมาณ {settings.event_name}",
        "",
        f"**{settings.organizer}** · วันที่จัดงาน {settings.event_date}",
        "",
        f"จัดทำเมื่อ {thai_display_date(generated_at.date())}",
        "",
        "## สรุปยอดรวม",
        "",
        f"- รายรับทั้งหมด: {format_amount(summary.total_income)} {currency}",
        f"- รายจ่ายทั้งหมด: {format_amount(summary.total_expense)} {currency}",
        f"- คงเหลือสุทธิ: {format_amount(summary.balance)} {currency}",
        f"- เป้าหมาย: {format_amount(settings.goal_target)} {currency} "
        f"(สำเร็จ {progress:.1f}%)",
        f"- จัดซื้อคอมพิวเตอร์ได้ประมาณ {units} {settings.unit_name} "
        f"(เครื่องละ {format_amount(settings.unit_price)} {currency})",
        "",
        "## แยกตามหมวดหมู่",
        "",
        "| หมวดหมู่ | รายรับ | รายจ่าย | สุทธิ |",
        "|---|---:|---:|---:|",
    ]

    for row in category_breakdown(entries):
        lines.append(
            f"| {row.category.label} | {format_amount(row.income)} "
            f"| {format_amount(row.expense)} | {format_amount(row.net)} |"
        )

    uncategorized = [entry for entry in entries if entry.category is None]
    if uncategorized:
        legacy = summarize(uncategorized)
        lines.append(
            f"| ไม่ระบุหมวด | {format_amount(legacy.total_income)} "
            f"| {format_amount(legacy.total_expense)} | {format_amount(legacy.balance)} |"
        )

    lines.extend([
        "",
        f"## รายการทั้งหมด ({len(entries)} รายการ)",
        "",
    ])

    if entries:
        lines.extend([
            "| วันที่ | รายการ | ประเภท | หมวดหมู่ | จำนวนเงิน |",
            "|---|---|---|---|---:|",
        ])
        for entry in entries:
            sign = "+" if entry.is_income else "-"
            category = entry.category.label if entry.category else "-"
            lines.append(
                f"| {_cell(entry.display_date) or '-'} | {_cell(entry.title)} "
                f"| {entry.kind.label} | {category} | {sign}{format_amount(entry.amount)} |"
            )
    else:
        lines.append("ไม่มีประวัติรายการ")

    lines.extend(["", "## ลงชื่อ", ""])
    for role in SIGNATORIES:
        lines.extend([
            "ลงชื่อ ........................................",
            "(........................................)",
            role,
            "",
        ])

    return "\n".join(lines).rstrip() + "\n"
