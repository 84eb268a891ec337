"""Report rendering package."""

from phapa_ledger.reports.printable import SIGNATORIES, render_report

__all__ = ["SIGNATORIES", "render_report"]
