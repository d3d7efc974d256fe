from __future__ import annotations

from flask import Blueprint, abort, current_app, redirect, render_template, request, url_for

from extensions import db_pool
from utils.classes import apply_fee_updates, list_classes
from utils.payments import clean_payment_form, payment_history as fetch_history, record_payment
from utils.students import get_student

fee_bp = Blueprint("fees", __name__)


@fee_bp.route("/edit-fees")
def edit_fees():
    db = db_pool.connection()
    try:
        classes = list_classes(db)
    except Exception:
        current_app.logger.exception("Error fetching classes")
        return "Server Error", 500
    finally:
        db.close()
    return render_template("edit_fees.html", classes=classes)


@fee_bp.route("/update-fees", methods=["POST"])
def update_fees():
    # Form is a flat mapping of class id -> new fee
    updates = request.form.to_dict()
    db = db_pool.connection()
    try:
        applied, skipped = apply_fee_updates(db, updates)
    except Exception:
        current_app.logger.exception("Error updating fees")
        return "Server Error", 500
    finally:
        db.close()
    if skipped:
        current_app.logger.info("Fee update skipped entries: %s", ", ".join(map(str, skipped)))
    current_app.logger.info("Fees updated for classes: %s", applied)
    return redirect(url_for("dashboard"), code=303)


@fee_bp.route("/students/<int:student_id>/pay", methods=["GET"])
def payment_form(student_id: int):
    db = db_pool.connection()
    try:
        student = get_student(db, student_id)
        classes = list_classes(db)
    except Exception:
        current_app.logger.exception("Error loading payment form for student %s", student_id)
        return "Server Error", 500
    finally:
        db.close()
    if student is None:
        abort(404)
    return render_template(
        "payment_form.html",
        student=student,
        classes=classes,
        error=request.args.get("error"),
    )


@fee_bp.route("/students/<int:student_id>/pay", methods=["POST"])
def submit_payment(student_id: int):
    payment = clean_payment_form(request.form)
    if payment is None:
        return redirect(
            url_for(
                ".payment_form",
                student_id=student_id,
                error="All fields are required and amount must be positive.",
            ),
            code=303,
        )

    db = db_pool.connection()
    try:
        total = record_payment(db, student_id, payment)
    except Exception:
        current_app.logger.exception("Payment failed for student %s", student_id)
        return redirect(url_for(".payment_form", student_id=student_id, error="Payment Failed."), code=303)
    finally:
        db.close()
    current_app.logger.info(
        "Payment of %s recorded for student %s (total paid %s)", payment["amount_paid"], student_id, total
    )
    return redirect(url_for("students.student_list", success="Payment added successfully."), code=303)


@fee_bp.route("/students/<int:student_id>/payment-history")
def payment_history(student_id: int):
    db = db_pool.connection()
    try:
        student = get_student(db, student_id)
        payments = fetch_history(db, student_id)
    except Exception:
        current_app.logger.exception("Error fetching payment history for student %s", student_id)
        return "Server Error", 500
    finally:
        db.close()
    return render_template("payment_history.html", student=student, payments=payments)
