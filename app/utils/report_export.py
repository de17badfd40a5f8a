import csv
import io
from typing import Any, Dict

from fpdf import FPDF

from app.utils.formatting import format_currency, format_date

CSV_FIELDS = ["date", "type", "category", "description", "amount"]


def _latin1(text: Any) -> str:
    # core PDF fonts only cover latin-1
    return str(text).encode("latin-1", "replace").decode("latin-1")


def generate_csv(report: Dict[str, Any]) -> str:
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_FIELDS, extrasaction="ignore")
    writer.writeheader()
    for t in report["transactions"]:
        writer.writerow({
            "date": t.get("date", ""),
            "type": t.get("type", ""),
            "category": t.get("category", ""),
            "description": t.get("description", ""),
            "amount": t.get("amount", 0),
        })
    return output.getvalue()


def generate_pdf(report: Dict[str, Any], currency: str = "USD") -> bytes:
    pdf = FPDF()
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, _latin1(f"Monthly Report - {report['month']} {report['year']}"), ln=True)

    pdf.set_font("Helvetica", "", 12)
    pdf.cell(0, 10, _latin1(f"Total: {format_currency(report['totalSpent'], currency)}"), ln=True)
    pdf.cell(0, 10, f"Transactions: {report['transactionCount']}", ln=True)
    pdf.ln(5)

    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 10, "Spending by Category:", ln=True)
    pdf.set_font("Helvetica", "", 12)
    if report["categoryTotals"]:
        ranked = sorted(report["categoryTotals"].items(), key=lambda pair: pair[1], reverse=True)
        for cat, amt in ranked:
            pdf.cell(0, 10, _latin1(f"- {cat}: {format_currency(amt, currency)}"), ln=True)
    else:
        pdf.cell(0, 10, "None", ln=True)

    pdf.ln(5)
    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 10, "Transactions:", ln=True)
    pdf.set_font("Helvetica", "", 10)
    for t in report["transactions"]:
        line = (
            f"{format_date(t.get('date'))}  {t.get('category', '')}  "
            f"{t.get('description', '')}  {format_currency(t.get('amount', 0), currency)}"
        )
        pdf.cell(0, 8, _latin1(line), ln=True)

    pdf_output = pdf.output()
    if isinstance(pdf_output, str):
        return pdf_output.encode("latin-1")
    return bytes(pdf_output)
