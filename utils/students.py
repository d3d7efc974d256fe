from __future__ import annotations

from typing import Any, Dict, List, Optional

from utils.db import transaction

_ROSTER = (
    "SELECT students.id, students.name, students.class_id, classes.name AS class_name, "
    "classes.total_fees, students.amount_paid "
    "FROM students JOIN classes ON students.class_id = classes.id"
)

SELECT_STUDENTS_IN_CLASS = _ROSTER + " WHERE students.class_id = %s ORDER BY students.id"
SEARCH_STUDENTS_IN_CLASS = (
    _ROSTER + " WHERE LOWER(students.name) LIKE %s AND students.class_id = %s ORDER BY students.id"
)
SELECT_STUDENT = "SELECT id, name, class_id, amount_paid FROM students WHERE id = %s"
INSERT_STUDENT = "INSERT INTO students (name, class_id) VALUES (%s, %s)"
UPDATE_STUDENT = "UPDATE students SET name = %s, class_id = %s WHERE id = %s"
DELETE_STUDENT_PAYMENTS = "DELETE FROM payments WHERE student_id = %s"
DELETE_STUDENT = "DELETE FROM students WHERE id = %s"


def students_in_class(conn, class_id: int) -> List[Dict[str, Any]]:
    cur = conn.cursor(dictionary=True)
    cur.execute(SELECT_STUDENTS_IN_CLASS, (class_id,))
    return cur.fetchall() or []


def search_class_students(conn, class_id: int, search: str = "") -> List[Dict[str, Any]]:
    """Students of ``class_id`` whose name contains ``search`` (case-insensitive).

    A search that matches nobody falls back to the whole class list rather
    than an empty page.
    """
    search = (search or "").strip()
    if search:
        cur = conn.cursor(dictionary=True)
        cur.execute(SEARCH_STUDENTS_IN_CLASS, (f"%{search.lower()}%", class_id))
        matches = cur.fetchall() or []
        if matches:
            return matches
    return students_in_class(conn, class_id)


def get_student(conn, student_id: int) -> Optional[Dict[str, Any]]:
    cur = conn.cursor(dictionary=True)
    cur.execute(SELECT_STUDENT, (student_id,))
    return cur.fetchone()


def add_student(conn, name: str, class_id: int) -> int:
    cur = conn.cursor()
    cur.execute(INSERT_STUDENT, (name, class_id))
    conn.commit()
    return cur.lastrowid


def update_student(conn, student_id: int, name: str, class_id: int) -> None:
    cur = conn.cursor()
    cur.execute(UPDATE_STUDENT, (name, class_id, student_id))
    conn.commit()


def delete_student(conn, student_id: int) -> None:
    """Remove a student together with all of their payments, atomically."""
    with transaction(conn):
        cur = conn.cursor()
        cur.execute(DELETE_STUDENT_PAYMENTS, (student_id,))
        cur.execute(DELETE_STUDENT, (student_id,))
