import csv
import io
from datetime import datetime

from fpdf import FPDF

MOST_SOLD_COLUMNS = [
    ("Item ID", "itemId"),
    ("Item Name", "itemName"),
    ("Category", "category"),
    ("Total Sold", "totalSold"),
    ("Revenue", "revenue"),
    ("Percentage of Sales", "percentageOfSales"),
]
PDF_HEADERS = ["Item ID", "Item Name", "Category", "Sold", "Revenue", "Share"]


def _latin1(value):
    # core PDF fonts only cover latin-1
    return str(value).encode("latin-1", "replace").decode("latin-1")


def to_csv(columns, rows):
    """Serialize ``rows`` (dicts) as CSV text. ``columns`` is a list of (header, key)."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow([header for header, _ in columns])
    for row in rows:
        writer.writerow(["" if row.get(key) is None else row.get(key) for _, key in columns])
    return buf.getvalue()


def most_sold_items_csv(items):
    return to_csv(MOST_SOLD_COLUMNS, items)


def most_sold_items_pdf(items, generated_at=None):
    generated_at = generated_at or datetime.utcnow()

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    pdf.set_font("Helvetica", style="B", size=16)
    pdf.cell(0, 10, text="Most Sold Items", new_x="LMARGIN", new_y="NEXT", align="C")
    pdf.set_font("Helvetica", size=10)
    pdf.cell(0, 8, text=f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M')} UTC", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    widths = [25, 50, 30, 25, 30, 30]
    pdf.set_font("Helvetica", style="B", size=10)
    for header, width in zip(PDF_HEADERS, widths):
        pdf.cell(width, 8, header, border=1)
    pdf.ln()

    pdf.set_font("Helvetica", size=10)
    for item in items:
        pdf.cell(widths[0], 8, _latin1(item["itemId"]), border=1)
        pdf.cell(widths[1], 8, _latin1(item["itemName"])[:28], border=1)
        pdf.cell(widths[2], 8, _latin1(item["category"] or "")[:16], border=1)
        pdf.cell(widths[3], 8, str(item["totalSold"]), border=1)
        pdf.cell(widths[4], 8, f"{item['revenue'] or 0:.2f}", border=1)
        pdf.cell(widths[5], 8, f"{item['percentageOfSales']:.2f}%", border=1)
        pdf.ln()

    return bytes(pdf.output())
