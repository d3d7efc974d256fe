from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from utils import optional_int

SELECT_CLASSES = "SELECT id, name, total_fees FROM classes ORDER BY id ASC"
SELECT_CLASS = "SELECT id, name, total_fees FROM classes WHERE id = %s"
INSERT_CLASS = "INSERT INTO classes (name, total_fees) VALUES (%s, %s)"
UPDATE_CLASS_FEE = "UPDATE classes SET total_fees = %s WHERE id = %s"


def list_classes(conn) -> List[Dict[str, Any]]:
    cur = conn.cursor(dictionary=True)
    cur.execute(SELECT_CLASSES)
    return cur.fetchall() or []


def get_class(conn, class_id: int) -> Optional[Dict[str, Any]]:
    cur = conn.cursor(dictionary=True)
    cur.execute(SELECT_CLASS, (class_id,))
    return cur.fetchone()


def add_class(conn, name: str, total_fees: int) -> int:
    cur = conn.cursor()
    cur.execute(INSERT_CLASS, (name, total_fees))
    conn.commit()
    return cur.lastrowid


def parse_fee(value: Any) -> Optional[int]:
    """Return ``value`` as a non-negative integer fee, or None when unusable."""
    try:
        fee = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    if fee < 0:
        return None
    return fee


def apply_fee_updates(conn, updates: Mapping[str, Any]) -> Tuple[List[int], List[str]]:
    """Apply a ``{class_id: fee}`` batch, one committed statement per class.

    Entries with a non-numeric key or an unparsable/negative fee are skipped;
    one bad entry never blocks the others. Returns ``(applied_ids, skipped_keys)``.
    """
    applied: List[int] = []
    skipped: List[str] = []
    cur = conn.cursor()
    for key, raw in updates.items():
        fee = parse_fee(raw)
        class_id = optional_int(key)
        if fee is None or class_id is None:
            skipped.append(key)
            continue
        cur.execute(UPDATE_CLASS_FEE, (fee, class_id))
        conn.commit()
        applied.append(class_id)
    return applied, skipped


def class_lookups(classes) -> Tuple[Dict[int, int], Dict[int, str]]:
    """Build ``class_id -> total_fees`` and ``class_id -> name`` maps."""
    fees: Dict[int, int] = {}
    names: Dict[int, str] = {}
    for cls in classes:
        fees[cls["id"]] = int(cls.get("total_fees") or 0)
        names[cls["id"]] = cls.get("name")
    return fees, names
