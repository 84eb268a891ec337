"""
Streamlit Frontend for Pha Pa Ledger

The dashboard the event committee uses on the day:
1. Totals and goal progress at the top
2. A form to record donations and expenses
3. Income/expense and category charts
4. The ledger table with tab filter and delete buttons
5. AI commentary and a printable report

All numbers come from LedgerSession; this file only lays them out.
"""

import asyncio
import html

import pandas as pd
import streamlit as st

from phapa_ledger.config import validate_all_settings
from phapa_ledger.models.entry import EntryCategory, EntryKind, LedgerTab, format_amount
from phapa_ledger.orchestrator import LedgerSession, create_session


# Page configuration
st.set_page_config(
    page_title="ระบบงบประมาณผ้าป่า",
    page_icon="🪷",
    layout="wide",
    initial_sidebar_state="collapsed",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .insight-box {
        padding: 20px;
        background-color: #fff7ed;
        border-radius: 10px;
        border-left: 5px solid #f59e0b;
        margin: 10px 0;
        font-style: italic;
    }
</style>
""", unsafe_allow_html=True)

TAB_LABELS = {
    LedgerTab.ALL: "ทั้งหมด",
    LedgerTab.INCOME: "รายรับ",
    LedgerTab.EXPENSE: "รายจ่าย",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_session() -> LedgerSession:
    """Get or create the ledger session (cached)."""
    return create_session()


def main():
    """Main application entry point."""
    session = get_session()
    settings = session.settings

    render_header(session)
    render_stats(session)

    if session.last_insight:
        st.markdown(
            f'<div class="insight-box">✨ {html.escape(session.last_insight)}</div>',
            unsafe_allow_html=True,
        )

    col1, col2 = st.columns(2)
    with col1:
        render_entry_form(session)
    with col2:
        render_charts(session)

    render_ledger(session)

    st.download_button(
        "🖨️ ดาวน์โหลดรายงานสรุป",
        data=session.report().encode("utf-8"),
        file_name=f"{settings.storage_key}_report.md",
        mime="text/markdown",
    )

    render_sidebar()


def render_header(session: LedgerSession):
    settings = session.settings
    st.title("ระบบงบประมาณผ้าป่า")
    st.markdown(
        f"🎓 **{settings.organizer}** · 📅 {settings.event_date} · "
        f"🖥️ {settings.event_name}"
    )

    if st.button(
        "✨ AI วิเคราะห์",
        disabled=session.insight_loading,
        help="ขอคำแนะนำจาก AI จากข้อมูลปัจจุบัน",
    ):
        with st.spinner("กำลังวิเคราะห์..."):
            run_async(session.request_insight())
        st.rerun()


def render_stats(session: LedgerSession):
    summary = session.summary()
    currency = session.settings.currency_label

    col1, col2, col3 = st.columns(3)
    col1.metric("รายรับรวม", f"{format_amount(summary.total_income)} {currency}")
    col2.metric("รายจ่ายรวม", f"{format_amount(summary.total_expense)} {currency}")
    col3.metric("คงเหลือสุทธิ", f"{format_amount(summary.balance)} {currency}")

    progress = session.goal_progress()
    st.progress(
        max(0.0, min(progress, 100.0)) / 100,
        text=(
            f"เป้าหมาย {format_amount(session.settings.goal_target)} {currency} "
            f"· {progress:.1f}% · ซื้อคอมพิวเตอร์ได้ {session.affordable_units()} "
            f"{session.settings.unit_name}"
        ),
    )


def render_entry_form(session: LedgerSession):
    st.subheader("➕ บันทึกรายการบุญ")

    kind = st.radio(
        "ประเภท",
        options=list(EntryKind),
        index=list(EntryKind).index(session.selected_kind),
        format_func=lambda k: k.label,
        horizontal=True,
    )
    session.select_kind(kind)

    category = st.selectbox(
        "หมวดหมู่",
        options=list(EntryCategory),
        index=list(EntryCategory).index(session.selected_category)
        if session.selected_category else 0,
        format_func=lambda c: c.label,
    )
    session.select_category(category)

    with st.form("entry_form", clear_on_submit=True):
        title = st.text_input("รายการ / ชื่อผู้บริจาค", placeholder="ระบุชื่อหรือรายการ...")
        amount = st.text_input(
            f"จำนวนเงิน ({session.settings.currency_label})", placeholder="0.00"
        )
        note = st.text_input("หมายเหตุ (ถ้ามี)")
        if st.form_submit_button("บันทึกรายการ", type="primary"):
            if session.submit_entry(title=title, amount=amount, note=note) is not None:
                st.rerun()


def render_charts(session: LedgerSession):
    st.subheader("📊 สถิติงบประมาณ")

    totals = session.income_expense_chart()
    st.bar_chart(
        pd.DataFrame(
            {"จำนวนเงิน": [float(v) for v in totals.values()]},
            index=list(totals.keys()),
        ),
    )

    categories = session.category_chart()
    if categories:
        st.bar_chart(
            pd.DataFrame(
                {"จำนวนเงิน": [float(v) for v in categories.values()]},
                index=list(categories.keys()),
            ),
        )


def render_ledger(session: LedgerSession):
    st.subheader("📄 ประวัติรายการทั้งหมด")

    tab = st.radio(
        "แสดง",
        options=list(LedgerTab),
        index=list(LedgerTab).index(session.active_tab),
        format_func=lambda t: TAB_LABELS[t],
        horizontal=True,
        label_visibility="collapsed",
    )
    session.select_tab(tab)

    entries = session.visible_entries()
    if not entries:
        st.info("ไม่มีประวัติรายการที่ต้องการแสดง")
        return

    for entry in entries:
        col1, col2, col3, col4, col5 = st.columns([2, 4, 2, 2, 1])
        col1.write(entry.display_date or "-")
        col2.write(f"**{entry.title}**")
        col3.write(entry.category.label if entry.category else "-")
        sign = "+" if entry.is_income else "-"
        color = "green" if entry.is_income else "red"
        col4.markdown(f":{color}[{sign}{format_amount(entry.amount)}]")
        if col5.button("🗑️", key=f"delete_{entry.id}"):
            session.delete_entry(entry.id)
            st.rerun()


def render_sidebar():
    st.sidebar.markdown("### Connection Status")
    status = validate_all_settings()
    if status.get("gemini"):
        st.sidebar.success("✅ Gemini (AI) - Configured")
    else:
        st.sidebar.warning(
            "⚠️ Gemini (AI) - Not configured. Set GEMINI_API_KEY in your `.env` file."
        )


if __name__ == "__main__":
    main()
