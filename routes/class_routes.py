from __future__ import annotations

from flask import Blueprint, abort, current_app, redirect, render_template, request, url_for

from extensions import db_pool
from utils import optional_int
from utils.classes import list_classes
from utils.reports import roster_rows
from utils.students import students_in_class

class_bp = Blueprint("classes", __name__)


@class_bp.route("/classes", methods=["GET"])
def class_list():
    db = db_pool.connection()
    try:
        classes = list_classes(db)
    except Exception:
        current_app.logger.exception("Error fetching classes")
        return "Server Error", 500
    finally:
        db.close()
    return render_template("class_payment.html", classes=classes, error=request.args.get("error"))


@class_bp.route("/classes", methods=["POST"])
def choose_class():
    class_id = optional_int(request.form.get("classId"))
    if class_id is None:
        return redirect(url_for(".class_list", error="Please choose a class."), code=303)
    return redirect(url_for(".class_payments", class_ref=class_id), code=303)


@class_bp.route("/classes/<class_ref>")
def class_payments(class_ref: str):
    # The class id travels only in the path; anything else (e.g. an unfilled ":id") is a bad request.
    class_id = optional_int(class_ref)
    if class_id is None:
        abort(400)

    db = db_pool.connection()
    try:
        classes = list_classes(db)
        selected = next((c for c in classes if c["id"] == class_id), None)
        students = students_in_class(db, class_id) if selected else []
    except Exception:
        current_app.logger.exception("Error fetching payments for class %s", class_id)
        return "Server Error", 500
    finally:
        db.close()
    if selected is None:
        abort(404)
    return render_template(
        "class_payment.html",
        classes=classes,
        selected=selected,
        **roster_rows(students),
    )
