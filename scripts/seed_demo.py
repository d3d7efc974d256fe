import argparse
import os
import random
import sys

# Ensure project root is importable when running from scripts/
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app import app  # noqa: E402
from extensions import db_pool  # noqa: E402
from utils.classes import add_class, list_classes  # noqa: E402
from utils.payments import record_payment  # noqa: E402
from utils.schema import ensure_core_tables  # noqa: E402
from utils.students import add_student  # noqa: E402


FIRST_NAMES = [
    "James", "Mary", "John", "Patricia", "Robert", "Jennifer", "Michael", "Linda",
    "William", "Elizabeth", "David", "Barbara", "Richard", "Susan", "Joseph", "Jessica",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Okafor", "Adeyemi", "Mensah", "Nwosu", "Balogun", "Eze", "Owusu", "Bello",
]

CLASSES = [
    ("Nursery 1", 45000), ("Nursery 2", 45000),
    *((f"Primary {i}", 50000 + 2500 * i) for i in range(1, 7)),
    *((f"JSS {i}", 70000) for i in range(1, 4)),
]


def random_name() -> str:
    return f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}"


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Seed demo classes, students and payments")
    p.add_argument("--students", type=int, default=40, help="number of students to create")
    p.add_argument("--payments", type=int, default=2, help="max payments per student")
    p.add_argument("--seed", type=int, default=None, help="random seed for repeatable data")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.seed is not None:
        random.seed(args.seed)

    with app.app_context():
        conn = db_pool.connection()
        try:
            ensure_core_tables(conn)
            classes = list_classes(conn)
            if not classes:
                for name, fee in CLASSES:
                    add_class(conn, name, fee)
                classes = list_classes(conn)

            created = paid = 0
            for _ in range(args.students):
                cls = random.choice(classes)
                student_id = add_student(conn, random_name(), cls["id"])
                created += 1
                for n in range(random.randint(0, args.payments)):
                    amount = random.choice([5000, 10000, 15000, 20000])
                    record_payment(
                        conn,
                        student_id,
                        {
                            "amount_paid": amount,
                            "payment_method": random.choice(["Cash", "Bank Transfer", "POS"]),
                            "term": random.choice(["First Term", "Second Term", "Third Term"]),
                            "session": "2025/2026",
                            "note": None,
                            "reference_code": f"SEED-{student_id}-{n + 1}",
                            "class_id": None,
                        },
                    )
                    paid += 1
        finally:
            conn.close()
            db_pool.close()

    print(f"Seeded {created} students with {paid} payments across {len(classes)} classes.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
