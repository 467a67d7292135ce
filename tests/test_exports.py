import csv
import io
from datetime import date
from types import SimpleNamespace

from openpyxl import load_workbook

from services import exports


def make_payment(note=None, status='paid'):
    prop = SimpleNamespace(name='Central Park Residences')
    room = SimpleNamespace(room_number='101A', property=prop)
    tenant = SimpleNamespace(first_name='John', last_name='Doe')
    lease = SimpleNamespace(room=room, tenant=tenant)
    return SimpleNamespace(lease=lease, amount=1500.0, payment_date=date(2024, 3, 5),
                           payment_for_month=date(2024, 3, 1), status=status, note=note)


def parse(text):
    return list(csv.reader(io.StringIO(text)))


def test_headers_are_fixed():
    assert exports.REVENUE_HEADER == ['Date', 'Tenant', 'Property', 'Room', 'Amount', 'Payment For']
    assert exports.PAYMENTS_HEADER == ['Date', 'Tenant', 'Property', 'Room', 'Amount', 'Status',
                                       'Payment For', 'Note']
    assert exports.TENANTS_HEADER == ['Name', 'Email', 'Phone', 'Property', 'Room', 'Lease Start',
                                      'Lease End', 'Rent Amount']


def test_revenue_row():
    assert exports.revenue_rows([make_payment()]) == [
        ['2024-03-05', 'John Doe', 'Central Park Residences', '101A', '1500.00', 'March 2024'],
    ]


def test_note_with_comma_and_quotes_survives_csv():
    note = 'Paid late, "by cheque"'
    text = exports.to_csv(exports.PAYMENTS_HEADER, exports.payment_rows([make_payment(note)]))

    header, row = parse(text)
    assert header == exports.PAYMENTS_HEADER
    assert row[-1] == note
    assert len(row) == len(exports.PAYMENTS_HEADER)


def test_missing_note_is_empty_field():
    text = exports.to_csv(exports.PAYMENTS_HEADER, exports.payment_rows([make_payment(None, 'pending')]))
    _, row = parse(text)
    assert row[5] == 'pending'
    assert row[7] == ''


def test_tenant_without_lease_gets_blank_lease_columns():
    tenant = SimpleNamespace(first_name='Jane', last_name='Roe', email='jane@example.com', phone=None)
    rows = exports.tenant_rows([{'tenant': tenant, 'active_lease': None}])
    assert rows == [['Jane Roe', 'jane@example.com', '', '', '', '', '', '']]


def test_tenant_with_lease():
    payment = make_payment()
    lease = payment.lease
    lease.start_date = date(2024, 1, 1)
    lease.end_date = date(2025, 1, 1)
    lease.rent_amount = 1500
    tenant = SimpleNamespace(first_name='John', last_name='Doe', email='john@example.com', phone='555')

    [row] = exports.tenant_rows([{'tenant': tenant, 'active_lease': lease}])
    assert row == ['John Doe', 'john@example.com', '555', 'Central Park Residences', '101A',
                   '2024-01-01', '2025-01-01', '1500.00']


def test_workbook_has_bold_header_and_rows():
    body = exports.to_workbook('Payments', exports.PAYMENTS_HEADER,
                               exports.payment_rows([make_payment('ok')]))
    ws = load_workbook(io.BytesIO(body)).active

    assert ws.title == 'Payments'
    assert [c.value for c in ws[1]] == exports.PAYMENTS_HEADER
    assert ws['A1'].font.bold
    assert ws['B2'].value == 'John Doe'
    assert ws.max_row == 2
