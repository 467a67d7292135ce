"""
Summary and breakdown calculations for the dashboard and report views.

Everything here works on records that were already fetched; nothing in this
module touches the session. Currency is accumulated with plain addition and
only rounded when displayed.
"""
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta


def occupancy_rate(occupied, total):
    """Percentage of occupied rooms, one decimal. 0 for a property with no rooms."""
    if total <= 0:
        return 0
    return round(occupied / total * 100, 1)


def count_rooms_by_status(rooms):
    counts = {'vacant': 0, 'occupied': 0, 'maintenance': 0}
    for room in rooms:
        counts[room.status] = counts.get(room.status, 0) + 1
    return counts


def expiring_leases(leases, today, days=30):
    """Leases ending between today and today + days (inclusive), soonest first."""
    horizon = today + timedelta(days=days)
    matching = [l for l in leases if today <= l.end_date <= horizon]
    return sorted(matching, key=lambda l: l.end_date)


def summary_counts(properties, rooms, tenants, leases, maintenance_requests, today, expiring_days=30):
    by_status = count_rooms_by_status(rooms)
    total_rooms = len(rooms)
    return {
        'total_properties': len(properties),
        'total_rooms': total_rooms,
        'occupied_rooms': by_status['occupied'],
        'vacant_rooms': by_status['vacant'],
        'maintenance_rooms': by_status['maintenance'],
        'total_tenants': len(tenants),
        'active_leases': sum(1 for l in leases if l.is_active(today)),
        'expiring_leases': len(expiring_leases(leases, today, expiring_days)),
        'open_maintenance': sum(1 for m in maintenance_requests if m.status == 'open'),
        'occupancy_rate': occupancy_rate(by_status['occupied'], total_rooms),
    }


def month_windows(today, months=6):
    """
    Trailing calendar months ending with the current one, oldest first.

    Returns a list of (label, first_day, last_day) tuples, e.g.
    ('Mar 2024', date(2024, 3, 1), date(2024, 3, 31)).
    """
    windows = []
    for i in range(months - 1, -1, -1):
        d = today - relativedelta(months=i)
        month_start = d.replace(day=1)
        month_end = month_start + relativedelta(months=1) - timedelta(days=1)
        windows.append((month_start.strftime('%b %Y'), month_start, month_end))
    return windows


def sum_amounts(payments):
    total = 0
    for p in payments:
        total += p.amount
    return total


def paid_between(payments, start, end):
    return sum_amounts(p for p in payments
                       if p.status == 'paid' and start <= p.payment_date <= end)


def revenue_by_property(payments):
    """Paid amounts keyed by property name (Lease -> Room -> Property)."""
    grouped = {}
    for payment in payments:
        name = payment.lease.room.property.name
        grouped[name] = grouped.get(name, 0) + payment.amount
    return grouped


def outstanding_by_tenant(payments):
    """Pending payments grouped per tenant name with amount and record count."""
    grouped = {}
    for payment in payments:
        tenant = payment.lease.tenant
        name = f"{tenant.first_name} {tenant.last_name}"
        if name not in grouped:
            grouped[name] = {'tenant': tenant, 'name': name, 'amount': 0, 'count': 0}
        grouped[name]['amount'] += payment.amount
        grouped[name]['count'] += 1
    return list(grouped.values())


def vacancy_by_property(rooms):
    grouped = {}
    for room in rooms:
        grouped.setdefault(room.property.name, []).append(room)
    return grouped


def property_occupancy(properties):
    rows = []
    for prop in properties:
        total = len(prop.rooms)
        occupied = sum(1 for r in prop.rooms if r.status == 'occupied')
        rows.append({
            'property': prop,
            'name': prop.name,
            'total_rooms': total,
            'occupied_rooms': occupied,
            'vacant_rooms': total - occupied,
            'occupancy_rate': occupancy_rate(occupied, total),
        })
    return rows


def overall_occupancy(rows):
    total = sum(r['total_rooms'] for r in rows)
    occupied = sum(r['occupied_rooms'] for r in rows)
    return {
        'total_rooms': total,
        'occupied_rooms': occupied,
        'vacant_rooms': sum(r['vacant_rooms'] for r in rows),
        'occupancy_rate': occupancy_rate(occupied, total),
    }


def payment_summary(payments):
    paid = [p for p in payments if p.status == 'paid']
    pending = [p for p in payments if p.status == 'pending']
    return {
        'total': len(payments),
        'total_amount': sum_amounts(payments),
        'paid': len(paid),
        'pending': len(pending),
        'paid_amount': sum_amounts(paid),
        'pending_amount': sum_amounts(pending),
    }


def maintenance_summary(requests):
    summary = {'total': len(requests)}
    for status in ('open', 'in_progress', 'completed'):
        summary[status] = sum(1 for m in requests if m.status == status)
    for priority in ('high', 'medium', 'low'):
        summary[priority] = sum(1 for m in requests if m.priority == priority)
    return summary


def active_lease_for(tenant, today):
    for lease in tenant.leases:
        if lease.is_active(today):
            return lease
    return None


def tenant_report(tenants, today):
    """
    One row per tenant. Tenants without an active lease are kept with zero
    totals rather than dropped.
    """
    rows = []
    for tenant in tenants:
        lease = active_lease_for(tenant, today)
        payments = lease.payments if lease else []
        rows.append({
            'tenant': tenant,
            'active_lease': lease,
            'total_paid': sum_amounts(p for p in payments if p.status == 'paid'),
            'total_pending': sum_amounts(p for p in payments if p.status == 'pending'),
            'has_active_lease': lease is not None,
        })
    return rows


def properties_report(properties, today):
    month_start = today.replace(day=1)
    rows = []
    for row in property_occupancy(properties):
        prop = row['property']
        active_payments = [p for room in prop.rooms for lease in room.leases
                           if lease.is_active(today) for p in lease.payments]
        row['monthly_revenue'] = paid_between(active_payments, month_start, today)
        row['open_maintenance'] = sum(1 for m in prop.maintenance_requests if m.status == 'open')
        rows.append(row)
    return rows


def payments_by_date(payments):
    """Total amount per payment date, ascending."""
    grouped = {}
    for p in payments:
        grouped[p.payment_date] = grouped.get(p.payment_date, 0) + p.amount
    return [{'date': d.isoformat(), 'amount': grouped[d]} for d in sorted(grouped)]


def default_report_range(start, end, today=None):
    """Revenue reports default to the current year to date."""
    today = today or date.today()
    return (start or date(today.year, 1, 1), end or today)
