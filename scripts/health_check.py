import json
import os
import sys

# Ensure project root is importable when running from scripts/
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app import app  # noqa: E402
from extensions import db_pool  # noqa: E402


def main() -> int:
    out = {"ok": True, "db": False}
    try:
        with app.app_context():
            conn = db_pool.connection()
            try:
                cur = conn.cursor()
                cur.execute("SELECT 1")
                cur.fetchone()
                out["db"] = True
            finally:
                conn.close()
    except Exception as e:
        out["ok"] = False
        out["error"] = str(e)
    finally:
        db_pool.close()
    print(json.dumps(out))
    return 0 if out["ok"] else 1


if __name__ == "__main__":
    sys.exit(main())
