import io
import pandas as pd
from models import ROOM_STATUSES

TEMPLATE_COLUMNS = ['Room Number', 'Rent Amount', 'Status']


def template_workbook():
    data = {
        'Room Number': ['101A', '102B'],
        'Rent Amount': [1500, 1200],
        'Status': ['vacant', 'maintenance'],
    }
    df = pd.DataFrame(data)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        df.to_excel(writer, index=False, sheet_name='Rooms')
    return output.getvalue()


def _clean(value):
    text = str(value).strip()
    return '' if text.lower() == 'nan' else text


def read_room_sheet(file):
    """
    Parse an uploaded CSV/Excel sheet into room dicts.
    Rows without a room number are skipped; bad rents become 0 and unknown
    statuses (including 'occupied', which only a lease may set) become vacant.
    """
    if file.filename.lower().endswith('.csv'):
        df = pd.read_csv(file, dtype={'Room Number': str})
    else:
        df = pd.read_excel(file, dtype={'Room Number': str})

    rooms = []
    for _, row in df.iterrows():
        room_number = _clean(row.get('Room Number', ''))
        if not room_number:
            continue

        try:
            rent = float(row.get('Rent Amount', 0))
            if pd.isna(rent):
                rent = 0.0
        except (TypeError, ValueError):
            rent = 0.0

        status = _clean(row.get('Status', 'vacant')).lower()
        if status not in ROOM_STATUSES or status == 'occupied':
            status = 'vacant'

        rooms.append({'room_number': room_number, 'rent_amount': rent, 'status': status})
    return rooms
