import copy
import os
import sys
from datetime import datetime, timedelta
from decimal import Decimal

import mysql.connector
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import app as flask_app  # noqa: E402
from extensions import db_pool  # noqa: E402
from utils import classes as class_sql  # noqa: E402
from utils import payments as payment_sql  # noqa: E402
from utils import reports as report_sql  # noqa: E402
from utils import students as student_sql  # noqa: E402


class FakeCursor:
    def __init__(self, db, dictionary=False):
        self.db = db
        self.dictionary = dictionary
        self.rows: list = []
        self.lastrowid = None
        self.rowcount = -1

    def execute(self, query, params=None):
        self.db.executed.append((query, params))
        if query in self.db.fail_on:
            raise mysql.connector.Error(msg=f"simulated failure: {query[:40]}")
        if query.strip().startswith("CREATE TABLE IF NOT EXISTS"):
            self.rows = []
            return
        handler = self.db.handlers.get(query)
        if handler is None:
            raise AssertionError(f"Unexpected SQL: {query}")
        result = handler(*(params or ()))
        if isinstance(result, int) and not isinstance(result, bool):
            self.lastrowid = result
            self.rows = []
        else:
            self.rows = [dict(r) for r in (result or [])]
        self.rowcount = len(self.rows)

    def _shape(self, row):
        return row if self.dictionary else tuple(row.values())

    def fetchone(self):
        if not self.rows:
            return None
        return self._shape(self.rows.pop(0))

    def fetchall(self):
        rows, self.rows = self.rows, []
        return [self._shape(r) for r in rows]

    def close(self):
        pass


class FakeConnection:
    """Stand-in for a pooled mysql-connector connection backed by FakeDatabase."""

    def __init__(self, db):
        self.db = db
        self.snapshot = None
        self.closed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self.db, dictionary=dictionary)

    def start_transaction(self):
        assert self.snapshot is None, "Transaction already in progress"
        self.snapshot = self.db.dump()

    def commit(self):
        self.snapshot = None
        self.db.commits += 1

    def rollback(self):
        if self.snapshot is not None:
            self.db.restore(self.snapshot)
            self.snapshot = None
        self.db.rollbacks += 1

    def close(self):
        self.closed = True
        self.db.closed += 1


class FakeDatabase:
    """In-memory classes/students/payments answering the app's SQL statements."""

    def __init__(self):
        self.classes: dict = {}
        self.students: dict = {}
        self.payments: dict = {}
        self.ids = {"classes": 0, "students": 0, "payments": 0}
        self.clock = datetime(2025, 1, 6, 8, 0, 0)
        self.executed: list = []
        self.fail_on: set = set()
        self.commits = 0
        self.rollbacks = 0
        self.opened = 0
        self.closed = 0
        self.handlers = {
            class_sql.SELECT_CLASSES: self._select_classes,
            class_sql.SELECT_CLASS: self._select_class,
            class_sql.INSERT_CLASS: self.add_class,
            class_sql.UPDATE_CLASS_FEE: self._update_class_fee,
            student_sql.SELECT_STUDENTS_IN_CLASS: self._roster,
            student_sql.SEARCH_STUDENTS_IN_CLASS: self._search_roster,
            student_sql.SELECT_STUDENT: self._select_student,
            student_sql.INSERT_STUDENT: self.add_student,
            student_sql.UPDATE_STUDENT: self._update_student,
            student_sql.DELETE_STUDENT_PAYMENTS: self._delete_payments,
            student_sql.DELETE_STUDENT: self._delete_student,
            payment_sql.INSERT_PAYMENT: self._insert_payment,
            payment_sql.SUM_STUDENT_PAYMENTS: self._sum_student_payments,
            payment_sql.UPDATE_STUDENT_TOTAL: self._update_student_total,
            payment_sql.SELECT_PAYMENT_HISTORY: self._payment_history,
            payment_sql.SUM_PAYMENTS_BY_STUDENT: self._sum_by_student,
            report_sql.COUNT_STUDENTS: lambda: [{"total": len(self.students)}],
            report_sql.SUM_EXPECTED_FEES: self._sum_expected,
            report_sql.SUM_AMOUNT_PAID: lambda: [
                {"paid": sum((s["amount_paid"] for s in self.students.values()), Decimal(0))}
            ],
            report_sql.SELECT_ALL_STUDENTS: lambda: self._plain_students(),
            report_sql.SELECT_CLASS_STUDENTS: lambda cid: self._plain_students(cid),
            "SELECT 1": lambda: [{"1": 1}],
        }

    # --- connection/state plumbing ---
    def connect(self):
        self.opened += 1
        return FakeConnection(self)

    def dump(self):
        return copy.deepcopy((self.classes, self.students, self.payments, self.ids))

    def restore(self, state):
        self.classes, self.students, self.payments, self.ids = copy.deepcopy(state)

    def _next(self, table):
        self.ids[table] += 1
        return self.ids[table]

    # --- seeding helpers (also used as INSERT handlers) ---
    def add_class(self, name, total_fees):
        cid = self._next("classes")
        self.classes[cid] = {"id": cid, "name": name, "total_fees": int(total_fees)}
        return cid

    def add_student(self, name, class_id, amount_paid=0):
        sid = self._next("students")
        self.students[sid] = {
            "id": sid,
            "name": name,
            "class_id": int(class_id),
            "amount_paid": Decimal(str(amount_paid)),
        }
        return sid

    def add_payment(self, student_id, amount, method="Cash", term="First Term", session="2025/2026",
                    note=None, reference_code="REF"):
        return self._insert_payment(student_id, Decimal(str(amount)), method, term, session, note, reference_code)

    def payments_for(self, student_id):
        return [p for p in self.payments.values() if p["student_id"] == student_id]

    # --- handlers ---
    def _select_classes(self):
        return [self.classes[k] for k in sorted(self.classes)]

    def _select_class(self, cid):
        return [self.classes[cid]] if cid in self.classes else []

    def _update_class_fee(self, fee, cid):
        if cid in self.classes:
            self.classes[cid]["total_fees"] = fee

    def _joined(self, st):
        cls = self.classes[st["class_id"]]
        return dict(st, class_name=cls["name"], total_fees=cls["total_fees"])

    def _roster(self, cid):
        return [
            self._joined(s) for k, s in sorted(self.students.items())
            if s["class_id"] == cid and s["class_id"] in self.classes
        ]

    def _search_roster(self, pattern, cid):
        needle = pattern.strip("%")
        return [r for r in self._roster(cid) if needle in r["name"].lower()]

    def _select_student(self, sid):
        return [self.students[sid]] if sid in self.students else []

    def _plain_students(self, cid=None):
        return [s for k, s in sorted(self.students.items()) if cid is None or s["class_id"] == cid]

    def _update_student(self, name, cid, sid):
        if sid in self.students:
            self.students[sid].update(name=name, class_id=cid)

    def _delete_payments(self, sid):
        self.payments = {k: p for k, p in self.payments.items() if p["student_id"] != sid}

    def _delete_student(self, sid):
        self.students.pop(sid, None)

    def _insert_payment(self, sid, amount, method, term, session, note, reference_code):
        pid = self._next("payments")
        self.clock += timedelta(minutes=1)
        self.payments[pid] = {
            "id": pid,
            "student_id": sid,
            "amount_paid": Decimal(str(amount)),
            "payment_date": self.clock,
            "payment_method": method,
            "term": term,
            "session": session,
            "note": note,
            "reference_code": reference_code,
        }
        return pid

    def _sum_student_payments(self, sid):
        return [{"paid": sum((p["amount_paid"] for p in self.payments_for(sid)), Decimal(0))}]

    def _update_student_total(self, cid, total, sid):
        if sid in self.students:
            if cid is not None:
                self.students[sid]["class_id"] = cid
            self.students[sid]["amount_paid"] = Decimal(str(total))

    def _payment_history(self, sid):
        return sorted(self.payments_for(sid), key=lambda p: (p["payment_date"], p["id"]), reverse=True)

    def _sum_by_student(self):
        totals: dict = {}
        for p in self.payments.values():
            totals[p["student_id"]] = totals.get(p["student_id"], Decimal(0)) + p["amount_paid"]
        return [{"student_id": k, "total_paid": v} for k, v in totals.items()]

    def _sum_expected(self):
        total = sum(
            self.classes[s["class_id"]]["total_fees"]
            for s in self.students.values()
            if s["class_id"] in self.classes
        )
        return [{"total": Decimal(total)}]


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def app(fake_db, monkeypatch):
    flask_app.testing = True
    monkeypatch.setattr(db_pool, "connection", fake_db.connect)
    return flask_app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c
