import csv
import io
import logging

import pandas as pd
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from cancellations.utils import format_percent

logger = logging.getLogger(__name__)

CANCELLATION_EXPORT_COLUMNS = {
    "id": "id",
    "customer_name": "customer",
    "email": "email",
    "segment": "segment",
    "closer_name": "closer",
    "cancellation_date": "cancellation_date",
    "primary_reason": "primary_reason",
    "agent_plan": "plan",
    "churn_amount": "churn_amount",
    "saved_revenue": "saved_revenue",
    "funds_disputed": "disputed",
    "saved_flag": "saved",
}

SAVED_EXPORT_COLUMNS = {
    "id": "id",
    "customer_name": "customer",
    "closer_name": "closer",
    "saved_by": "saved_by",
    "save_reason": "save_reason",
    "save_notes": "save_notes",
    "saved_revenue": "saved_revenue",
    "cancellation_date": "cancellation_date",
}


def _yes_no(value):
    return "Yes" if value else "No"


def rows_to_csv(rows, columns):
    """Render flat cancellation rows as CSV text, every cell quoted.

    ``columns`` maps row keys to CSV headers and fixes the column order.
    Returns an empty string when there are no rows.
    """
    if not rows:
        return ""
    df = pd.DataFrame(rows, columns=list(columns)).rename(columns=columns)
    for flag in ("saved", "disputed"):
        if flag in df.columns:
            df[flag] = df[flag].map(_yes_no)
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, na_rep="", lineterminator="\n")


def cancellations_csv(rows):
    return rows_to_csv(rows, CANCELLATION_EXPORT_COLUMNS)


def saved_cases_csv(rows):
    return rows_to_csv(rows, SAVED_EXPORT_COLUMNS)


def report_kpis(summary):
    return {
        "Total cancellations": summary.total,
        "Total saved cases": summary.saved,
        "Save rate": format_percent(summary.save_rate),
        "Avg days on platform": summary.avg_days_on_platform,
        "Early churn (<= 7 days)": summary.early_churn,
    }


def build_monthly_report(summary, insights, title="Monthly Churn Report"):
    """Render KPIs, reason breakdown, closer performance and insights to PDF bytes."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=LETTER,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
        leftMargin=0.6 * inch,
        rightMargin=0.6 * inch,
        title=title,
    )
    styles = getSampleStyleSheet()
    s_title = ParagraphStyle("ReportTitle", parent=styles["Title"], fontSize=20, spaceAfter=4)
    s_small = ParagraphStyle("ReportSmall", parent=styles["Normal"], fontSize=9, textColor=colors.HexColor("#64748b"))
    s_h2 = ParagraphStyle("ReportH2", parent=styles["Heading2"], fontSize=14, spaceBefore=12, spaceAfter=6)
    s_body = ParagraphStyle("ReportBody", parent=styles["Normal"], fontSize=11, leading=15)

    table_style = TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4f46e5")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#c7d2fe")),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ])

    story = [
        Paragraph(title, s_title),
        Paragraph(f"Generated: {timezone.now():%Y-%m-%d %H:%M %Z}", s_small),
        Spacer(1, 10),
        Paragraph("Key Metrics", s_h2),
    ]

    kpi_rows = [["Metric", "Value"]] + [[label, str(value)] for label, value in report_kpis(summary).items()]
    kpi_table = Table(kpi_rows, colWidths=[3 * inch, 2 * inch])
    kpi_table.setStyle(table_style)
    story.append(kpi_table)

    story.append(Paragraph("Reason Breakdown", s_h2))
    if summary.reason_counts:
        reason_rows = [["Reason", "Cancellations"]] + [
            [reason, str(count)] for reason, count in summary.reason_counts.items()
        ]
        reason_table = Table(reason_rows, colWidths=[3 * inch, 2 * inch])
        reason_table.setStyle(table_style)
        story.append(reason_table)
    else:
        story.append(Paragraph("No cancellations recorded.", s_body))

    story.append(Paragraph("Closer Performance", s_h2))
    closer_rows = [["Closer", "Saves", "Cancels", "Save rate"]] + [
        [closer.name, str(closer.saves), str(closer.losses), format_percent(closer.save_rate)]
        for closer in summary.closers
    ]
    closer_table = Table(closer_rows, colWidths=[2.4 * inch, 1 * inch, 1 * inch, 1.2 * inch])
    closer_table.setStyle(table_style)
    story.append(closer_table)

    story.append(Paragraph("Insights", s_h2))
    for idx, insight in enumerate(insights, start=1):
        story.append(Paragraph(f"{idx}. {_escape(insight)}", s_body))

    doc.build(story)
    pdf = buf.getvalue()
    logger.info(f"Built monthly report PDF ({len(pdf)} bytes, {len(insights)} insights)")
    return pdf


def _escape(text):
    # Paragraph parses a mini markup language
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
