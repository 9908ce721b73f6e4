from openpyxl import Workbook
from openpyxl.styles import Font, Alignment
from openpyxl.worksheet.worksheet import Worksheet
from io import BytesIO
from typing import Any, Dict, List
from models.booking import Booking, BookingStatus
from utils.formatters import STATUS_TEXT

def _style_sheet(ws: Worksheet) -> None:
    header_font = Font(bold=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center")

    for column in ws.columns:
        max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
        ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

def export_bookings_to_excel(bookings: List[Booking]) -> BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = "Брони"

    ws.append(["ID", "Дата", "Время", "Длительность, мин", "Столик", "Гостей",
               "Клиент", "Email", "Телефон", "Статус", "Пожелания"])

    for booking in bookings:
        customer = booking.customer
        ws.append([
            booking.id,
            booking.date.strftime('%d.%m.%Y'),
            booking.date.strftime('%H:%M'),
            booking.duration,
            booking.table.number if booking.table else booking.table_id,
            booking.party_size,
            customer.name if customer else "",
            customer.email if customer else "",
            (customer.phone or "") if customer else "",
            STATUS_TEXT.get(booking.status, booking.status.value),
            booking.special_requests or ""
        ])

    _style_sheet(ws)

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output

def export_summary_to_excel(summary: Dict[str, Any], utilisation: List[Dict[str, Any]]) -> BytesIO:
    wb = Workbook()

    ws = wb.active
    ws.title = "Сводка"
    ws.append(["Показатель", "Значение"])
    ws.append(["Всего броней", summary["total_bookings"]])
    ws.append(["Гостей", summary["total_guests"]])
    ws.append(["Клиентов", summary["unique_customers"]])
    ws.append(["Доля завершенных, %", round(summary["completion_rate"], 1)])
    for status in BookingStatus:
        ws.append([STATUS_TEXT[status], summary["by_status"].get(status.value, 0)])

    ws = wb.create_sheet("Столики")
    ws.append(["Столик", "Мест", "Активен", "Броней", "Гостей", "Занято, мин", "Загрузка, %"])
    for row in utilisation:
        ws.append([
            row["number"],
            row["capacity"],
            "да" if row["is_active"] else "нет",
            row["bookings_count"],
            row["guests"],
            row["booked_minutes"],
            round(row["utilisation"], 1)
        ])

    for sheet in wb.worksheets:
        _style_sheet(sheet)

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output
