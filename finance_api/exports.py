# finance_api/exports.py
from datetime import datetime
from io import BytesIO

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

PDF_MIMETYPE = "application/pdf"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MIMETYPE = "text/csv"

SUPPORTED_FORMATS = {
    "transactions": ("pdf", "xlsx", "csv"),
    "budgets": ("pdf", "xlsx"),
    "goals": ("pdf", "xlsx"),
    "budget-plan": ("pdf",),
}


def format_currency(value):
    return f"${float(value):,.2f}"


class ReportExporter:
    """Render report payloads as PDF (reportlab) or spreadsheets (pandas)"""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self.custom_styles = self._create_custom_styles()

    def _create_custom_styles(self):
        return {
            'ReportTitle': ParagraphStyle(
                'ReportTitle',
                parent=self.styles['Heading1'],
                fontSize=18,
                spaceAfter=6,
                alignment=1,
                textColor=colors.darkblue
            ),
            'Generated': ParagraphStyle(
                'Generated',
                parent=self.styles['Normal'],
                fontSize=9,
                alignment=1,
                textColor=colors.grey
            ),
            'SectionTitle': ParagraphStyle(
                'SectionTitle',
                parent=self.styles['Heading2'],
                fontSize=13,
                spaceBefore=16,
                spaceAfter=8,
                textColor=colors.darkblue
            ),
        }

    # ---------------- Dispatch ----------------
    def export(self, kind, fmt, payload, records=None):
        """Returns (bytes, mimetype, filename); ValueError on an unsupported format."""
        formats = SUPPORTED_FORMATS.get(kind)
        if formats is None:
            raise ValueError(f"Unknown report '{kind}'")
        if fmt not in formats:
            raise ValueError(f"Unsupported format '{fmt}' for {kind} report; use one of {', '.join(formats)}")

        stamp = datetime.now().strftime("%Y%m%d")
        filename = f"{kind}-report-{stamp}.{fmt}"
        if fmt == "csv":
            return self.transactions_csv(records or []), CSV_MIMETYPE, filename

        renderer = getattr(self, f"{kind.replace('-', '_')}_{fmt}")
        mimetype = PDF_MIMETYPE if fmt == "pdf" else XLSX_MIMETYPE
        if kind == "budget-plan":
            return renderer(payload), mimetype, filename
        return renderer(payload, records or []), mimetype, filename

    # ---------------- PDF ----------------
    def _table(self, rows, col_widths=None):
        table = Table(rows, colWidths=col_widths, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1e90ff')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('ALIGN', (1, 1), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        return table

    def _document(self, title, sections):
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=54,
            leftMargin=54,
            topMargin=54,
            bottomMargin=36,
            title=title
        )

        story = [
            Paragraph(title, self.custom_styles['ReportTitle']),
            Paragraph(f"Generated on {datetime.now().strftime('%Y-%m-%d %H:%M')}", self.custom_styles['Generated']),
            Spacer(1, 12),
        ]
        for heading, rows, widths in sections:
            story.append(Paragraph(heading, self.custom_styles['SectionTitle']))
            if len(rows) > 1:
                story.append(self._table(rows, widths))
            else:
                story.append(Paragraph("No data available.", self.styles['Normal']))

        doc.build(story)
        return buffer.getvalue()

    def transactions_pdf(self, report, records):
        summary = [
            ['Metric', 'Value'],
            ['Total Income', format_currency(report['totalIncome'])],
            ['Total Expense', format_currency(report['totalExpense'])],
            ['Net Balance', format_currency(report['netBalance'])],
            ['Transaction Count', str(report['transactionCount'])],
        ]
        categories = [['Category', 'Amount']] + [
            [cat.capitalize(), format_currency(amount)]
            for cat, amount in report['categoryBreakdown'].items()
        ]
        monthly = [['Month', 'Income', 'Expense', 'Net']] + [
            [month, format_currency(d['income']), format_currency(d['expense']), format_currency(d['net'])]
            for month, d in report['monthlyData'].items()
        ]
        return self._document("Financial Report", [
            ("Summary", summary, [3 * inch, 2.5 * inch]),
            ("Category Breakdown", categories, [3 * inch, 2.5 * inch]),
            ("Monthly Breakdown", monthly, None),
        ])

    def budgets_pdf(self, report, records):
        summary = [
            ['Metric', 'Value'],
            ['Total Budget', format_currency(report['totalBudget'])],
            ['Total Spent', format_currency(report['totalSpent'])],
        ]
        categories = [['Category', 'Budget', 'Spent']] + [
            [cat, format_currency(v['budget']), format_currency(v['spent'])]
            for cat, v in report['categoryBreakdown'].items()
        ]
        trend = [['Month', 'Spent']] + [
            [month, format_currency(spent)] for month, spent in report['monthlyTrend'].items()
        ]
        return self._document("Budget Report", [
            ("Summary", summary, [3 * inch, 2.5 * inch]),
            ("Category Breakdown", categories, None),
            ("Monthly Trend", trend, [3 * inch, 2.5 * inch]),
        ])

    def goals_pdf(self, report, records):
        summary = [
            ['Metric', 'Value'],
            ['Total Target', format_currency(report['totalTarget'])],
            ['Total Saved', format_currency(report['totalCurrent'])],
            ['Overall Progress', f"{report['overallProgress']:.1f}%"],
            ['Achieved Goals', str(report['achievedCount'])],
            ['Goals In Progress', str(report['inProgressCount'])],
        ]
        goals = [['Goal', 'Target', 'Saved', 'Progress', 'Deadline', 'Status']] + [
            [g['goalName'], format_currency(g['targetAmount']), format_currency(g['currentAmount']),
             f"{g['progress']:.1f}%", g['deadline'], g['status'].title()]
            for g in report['goals']
        ]
        return self._document("Financial Goals Report", [
            ("Summary", summary, [3 * inch, 2.5 * inch]),
            ("Goals", goals, None),
        ])

    def budget_plan_pdf(self, plan):
        summary = [
            ['Bucket', 'Amount'],
            ['Monthly Income', format_currency(plan['monthlyIncome'])],
            ['Essentials (50%)', format_currency(plan['essentials'])],
            ['Discretionary (30%)', format_currency(plan['discretionary'])],
            ['Savings (20%)', format_currency(plan['savings'])],
        ]
        categories = [['Category', 'Spent', '% of Spending', 'Type', 'Recommended']] + [
            [row['category'], format_currency(row['totalSpent']), f"{row['percentage']}%",
             row['type'].title(), format_currency(row['recommendedBudget'])]
            for row in plan['categoryBreakdown']
        ]
        return self._document("Automated Budget Plan", [
            ("50/30/20 Allocation", summary, [3 * inch, 2.5 * inch]),
            ("Category Recommendations", categories, None),
        ])

    # ---------------- Spreadsheets ----------------
    def _workbook(self, sheets):
        buffer = BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            for name, df in sheets:
                df.to_excel(writer, sheet_name=name, index=False)
        return buffer.getvalue()

    def transactions_xlsx(self, report, records):
        summary = pd.DataFrame([
            ("Total Income", report['totalIncome']),
            ("Total Expense", report['totalExpense']),
            ("Net Balance", report['netBalance']),
            ("Transaction Count", report['transactionCount']),
        ], columns=["Metric", "Value"])
        categories = pd.DataFrame(list(report['categoryBreakdown'].items()), columns=["Category", "Amount"])
        monthly = pd.DataFrame(
            [(m, d['income'], d['expense'], d['net']) for m, d in report['monthlyData'].items()],
            columns=["Month", "Income", "Expense", "Net Balance"],
        )
        return self._workbook([
            ("Summary", summary),
            ("Category Breakdown", categories),
            ("Monthly Breakdown", monthly),
            ("Transactions", self._transactions_frame(records)),
        ])

    def budgets_xlsx(self, report, records):
        budgets = pd.DataFrame(records, columns=["title", "category", "amount", "spent", "percentageUsed", "createdAt"])
        budgets.columns = ["Title", "Category", "Budget", "Spent", "% Used", "Created"]
        categories = pd.DataFrame(
            [(cat, v['budget'], v['spent']) for cat, v in report['categoryBreakdown'].items()],
            columns=["Category", "Budget", "Spent"],
        )
        return self._workbook([("Budgets", budgets), ("Category Breakdown", categories)])

    def goals_xlsx(self, report, records):
        goals = pd.DataFrame(report['goals'], columns=["goalName", "targetAmount", "currentAmount", "progress", "deadline", "status"])
        goals.columns = ["Goal", "Target", "Saved", "Progress %", "Deadline", "Status"]
        summary = pd.DataFrame([
            ("Total Target", report['totalTarget']),
            ("Total Saved", report['totalCurrent']),
            ("Overall Progress %", report['overallProgress']),
            ("Achieved", report['achievedCount']),
            ("In Progress", report['inProgressCount']),
        ], columns=["Metric", "Value"])
        return self._workbook([("Summary", summary), ("Goals", goals)])

    def _transactions_frame(self, records):
        df = pd.DataFrame(records, columns=["date", "type", "category", "amount", "notes"])
        df.columns = ["Date", "Type", "Category", "Amount", "Notes"]
        return df

    def transactions_csv(self, records):
        return self._transactions_frame(records).to_csv(index=False).encode("utf-8")
