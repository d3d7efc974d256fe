from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from utils import optional_int
from utils.db import transaction

CENT = Decimal("0.01")
REQUIRED_FIELDS = ("payment_method", "term", "session", "reference_code")

INSERT_PAYMENT = (
    "INSERT INTO payments (student_id, amount_paid, payment_date, payment_method, term, session, note, reference_code) "
    "VALUES (%s, %s, NOW(), %s, %s, %s, %s, %s)"
)
SUM_STUDENT_PAYMENTS = "SELECT COALESCE(SUM(amount_paid), 0) AS paid FROM payments WHERE student_id = %s"
UPDATE_STUDENT_TOTAL = "UPDATE students SET class_id = COALESCE(%s, class_id), amount_paid = %s WHERE id = %s"
SELECT_PAYMENT_HISTORY = (
    "SELECT id, student_id, amount_paid, payment_date, payment_method, term, session, note, reference_code "
    "FROM payments WHERE student_id = %s ORDER BY payment_date DESC, id DESC"
)
SUM_PAYMENTS_BY_STUDENT = "SELECT student_id, SUM(amount_paid) AS total_paid FROM payments GROUP BY student_id"


def parse_amount(raw: Any) -> Optional[Decimal]:
    """Return a finite, strictly positive amount in whole cents, or None.

    Sub-cent precision is rejected since ``payments.amount_paid`` is DECIMAL(12,2).
    """
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    try:
        if amount != amount.quantize(CENT):
            return None
    except InvalidOperation:
        return None
    return amount


def clean_payment_form(form: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """Validate a submitted payment form.

    Returns the cleaned payment fields, or None when a required field is
    blank or the amount is not a positive number.
    """
    cleaned: Dict[str, Any] = {}
    for field in REQUIRED_FIELDS:
        value = (form.get(field) or "").strip()
        if not value:
            return None
        cleaned[field] = value
    amount = parse_amount(form.get("amount_paid", ""))
    if amount is None:
        return None
    cleaned["amount_paid"] = amount
    cleaned["note"] = (form.get("note") or "").strip() or None
    cleaned["class_id"] = optional_int(form.get("classId"))
    return cleaned


def record_payment(conn, student_id: int, payment: Mapping[str, Any]) -> Decimal:
    """Insert a payment and recompute the student's running total in one transaction.

    ``payment`` is the output of :func:`clean_payment_form`. A ``class_id`` of
    None keeps the student's current class. Returns the new total.
    """
    with transaction(conn):
        cur = conn.cursor(dictionary=True)
        cur.execute(
            INSERT_PAYMENT,
            (
                student_id,
                payment["amount_paid"],
                payment["payment_method"],
                payment["term"],
                payment["session"],
                payment.get("note"),
                payment["reference_code"],
            ),
        )
        cur.execute(SUM_STUDENT_PAYMENTS, (student_id,))
        total = Decimal(str(cur.fetchone()["paid"] or 0))
        cur.execute(UPDATE_STUDENT_TOTAL, (payment.get("class_id"), total, student_id))
    return total


def payment_history(conn, student_id: int) -> List[Dict[str, Any]]:
    cur = conn.cursor(dictionary=True)
    cur.execute(SELECT_PAYMENT_HISTORY, (student_id,))
    return cur.fetchall() or []


def paid_by_student(conn) -> Dict[int, Decimal]:
    """Map ``student_id -> sum of payments`` straight from the payments table."""
    cur = conn.cursor(dictionary=True)
    cur.execute(SUM_PAYMENTS_BY_STUDENT)
    return {row["student_id"]: Decimal(str(row["total_paid"] or 0)) for row in cur.fetchall() or []}
