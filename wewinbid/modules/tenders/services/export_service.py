import csv
import io
from datetime import datetime
from typing import Iterable, List

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from wewinbid.modules.tenders.db.schema import Tender

EXPORT_COLUMNS = [
    ("reference", "Référence"),
    ("title", "Titre"),
    ("type", "Type"),
    ("status", "Statut"),
    ("sector", "Secteur"),
    ("buyer_name", "Acheteur"),
    ("country", "Pays"),
    ("region", "Région"),
    ("estimated_value", "Valeur estimée"),
    ("proposed_price", "Prix proposé"),
    ("deadline", "Date limite"),
    ("submission_date", "Date de dépôt"),
    ("ai_score", "Score"),
    ("created_at", "Créé le"),
]


def _cell(value):
    if value is None:
        return ""
    if hasattr(value, "value"):
        return value.value
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    return value


def tender_rows(tenders: Iterable[Tender]) -> List[list]:
    return [[_cell(getattr(tender, field)) for field, _ in EXPORT_COLUMNS] for tender in tenders]


def export_csv(tenders: Iterable[Tender]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";")
    writer.writerow([label for _, label in EXPORT_COLUMNS])
    writer.writerows(tender_rows(tenders))
    # BOM so spreadsheet tools detect UTF-8
    return ("\ufeff" + buffer.getvalue()).encode("utf-8")


def export_xlsx(tenders: Iterable[Tender]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Appels d'offres"
    sheet.append([label for _, label in EXPORT_COLUMNS])
    header_fill = PatternFill(start_color="2563EB", end_color="2563EB", fill_type="solid")
    for cell in sheet[1]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = header_fill
    for row in tender_rows(tenders):
        sheet.append(row)
    for column in sheet.columns:
        width = max(len(str(cell.value or "")) for cell in column)
        sheet.column_dimensions[column[0].column_letter].width = min(max(width + 2, 10), 60)

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
