"""
Fixed-column exports of payments and tenants, as CSV text or an xlsx workbook.

Row builders return display values (strings) so both formats carry identical
content. Missing optional values become ''.
"""
import csv
import io
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment

REVENUE_HEADER = ['Date', 'Tenant', 'Property', 'Room', 'Amount', 'Payment For']
PAYMENTS_HEADER = ['Date', 'Tenant', 'Property', 'Room', 'Amount', 'Status', 'Payment For', 'Note']
TENANTS_HEADER = ['Name', 'Email', 'Phone', 'Property', 'Room', 'Lease Start', 'Lease End', 'Rent Amount']


def fmt_date(d):
    return d.isoformat() if d else ''


def fmt_month(d):
    return d.strftime('%B %Y') if d else ''


def fmt_amount(value):
    return f"{value:.2f}" if value is not None else ''


def _payment_cells(p):
    lease = p.lease
    return [
        fmt_date(p.payment_date),
        f"{lease.tenant.first_name} {lease.tenant.last_name}",
        lease.room.property.name,
        lease.room.room_number,
        fmt_amount(p.amount),
    ]


def revenue_rows(payments):
    return [_payment_cells(p) + [fmt_month(p.payment_for_month)] for p in payments]


def payment_rows(payments):
    return [_payment_cells(p) + [p.status, fmt_month(p.payment_for_month), p.note or '']
            for p in payments]


def tenant_rows(report_rows):
    """Takes rows from reporting.tenant_report; uses each tenant's active lease if any."""
    rows = []
    for row in report_rows:
        t = row['tenant']
        lease = row['active_lease']
        cells = [f"{t.first_name} {t.last_name}", t.email or '', t.phone or '']
        if lease:
            cells += [
                lease.room.property.name,
                lease.room.room_number,
                fmt_date(lease.start_date),
                fmt_date(lease.end_date),
                fmt_amount(lease.rent_amount),
            ]
        else:
            cells += ['', '', '', '', '']
        rows.append(cells)
    return rows


def to_csv(header, rows):
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
    writer.writerow(header)
    writer.writerows(rows)
    return output.getvalue()


def to_workbook(title, header, rows):
    """Returns the xlsx bytes for a single-sheet export."""
    wb = Workbook()
    ws = wb.active
    ws.title = title

    ws.append(header)
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal='center')

    for row in rows:
        ws.append(row)

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()
