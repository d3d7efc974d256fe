from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from utils.classes import class_lookups, list_classes
from utils.payments import paid_by_student

COUNT_STUDENTS = "SELECT COUNT(*) AS total FROM students"
SUM_EXPECTED_FEES = (
    "SELECT COALESCE(SUM(classes.total_fees), 0) AS total "
    "FROM students JOIN classes ON students.class_id = classes.id"
)
SUM_AMOUNT_PAID = "SELECT COALESCE(SUM(amount_paid), 0) AS paid FROM students"
SELECT_ALL_STUDENTS = "SELECT id, name, class_id, amount_paid FROM students ORDER BY id"
SELECT_CLASS_STUDENTS = "SELECT id, name, class_id, amount_paid FROM students WHERE class_id = %s ORDER BY id"


def _dec(value: Any) -> Decimal:
    return Decimal(str(value or 0))


def format_money(value: Any) -> str:
    """Thousands-separated amount; cents only when there are any."""
    amount = _dec(value)
    if amount == amount.to_integral_value():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def dashboard_summary(conn) -> Dict[str, Any]:
    """Totals for the dashboard cards: students, expected fees, paid, balance."""
    cur = conn.cursor(dictionary=True)
    cur.execute(COUNT_STUDENTS)
    total_students = int(cur.fetchone()["total"] or 0)
    cur.execute(SUM_EXPECTED_FEES)
    total_fees = _dec(cur.fetchone()["total"])
    cur.execute(SUM_AMOUNT_PAID)
    total_paid = _dec(cur.fetchone()["paid"])
    return {
        "total_students": total_students,
        "total_fees": total_fees,
        "total_payments": total_paid,
        "total_balance": total_fees - total_paid,
    }


def roster_rows(students: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Per-student expected/paid/balance for a class roster, plus class totals.

    ``students`` are rows joined with their class (``total_fees`` present).
    """
    rows: List[Dict[str, Any]] = []
    expected_total = paid_total = Decimal(0)
    for st in students:
        expected = _dec(st.get("total_fees"))
        paid = _dec(st.get("amount_paid"))
        rows.append(dict(st, expected=expected, paid=paid, balance=expected - paid))
        expected_total += expected
        paid_total += paid
    return {
        "rows": rows,
        "expected_total": expected_total,
        "paid_total": paid_total,
        "balance_total": expected_total - paid_total,
    }


def build_report_context(conn, class_id: Optional[int] = None, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Gather everything the PDF fee report template needs.

    Students are limited to ``class_id`` when given. Amounts paid come from
    the payments table itself rather than the denormalized student total.
    """
    cur = conn.cursor(dictionary=True)
    if class_id is None:
        cur.execute(SELECT_ALL_STUDENTS)
    else:
        cur.execute(SELECT_CLASS_STUDENTS, (class_id,))
    students = cur.fetchall() or []

    paid_map = paid_by_student(conn)
    class_fees, class_names = class_lookups(list_classes(conn))

    rows: List[Dict[str, Any]] = []
    for st in students:
        expected = Decimal(class_fees.get(st["class_id"], 0))
        paid = paid_map.get(st["id"], Decimal(0))
        rows.append(
            {
                "id": st["id"],
                "name": st["name"],
                "class_name": class_names.get(st["class_id"], ""),
                "expected": expected,
                "paid": paid,
                "balance": expected - paid,
            }
        )

    now = now or datetime.now()
    return {
        "students": students,
        "rows": rows,
        "class_id": class_id,
        "class_name": class_names.get(class_id) if class_id is not None else None,
        "class_fees": class_fees,
        "class_names": class_names,
        "paid_map": paid_map,
        "expected_total": sum((r["expected"] for r in rows), Decimal(0)),
        "paid_total": sum((r["paid"] for r in rows), Decimal(0)),
        "balance_total": sum((r["balance"] for r in rows), Decimal(0)),
        "date_string": now.strftime("%d/%m/%Y"),
    }
