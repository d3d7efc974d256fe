from __future__ import annotations

from flask import Blueprint, abort, current_app, redirect, render_template, request, url_for

from extensions import db_pool
from utils import optional_int
from utils.classes import list_classes
from utils.students import (
    add_student as insert_student,
    delete_student as remove_student,
    get_student,
    search_class_students,
    update_student as save_student,
)

student_bp = Blueprint("students", __name__)


def _render_listing(template: str):
    """Class picker plus, once a class is chosen, its (optionally searched) students."""
    class_id = optional_int(request.args.get("classId"))
    search = (request.args.get("search") or "").strip()
    db = db_pool.connection()
    try:
        classes = list_classes(db)
        students = search_class_students(db, class_id, search) if class_id is not None else None
    except Exception:
        current_app.logger.exception("Error retrieving student list")
        return "Error retrieving student list", 500
    finally:
        db.close()
    return render_template(
        template,
        classes=classes,
        students=students,
        search=search,
        class_id=class_id,
        success=request.args.get("success"),
        error=request.args.get("error"),
    )


@student_bp.route("/view-student")
def view_student():
    return _render_listing("view_student.html")


@student_bp.route("/students")
def student_list():
    return _render_listing("student_list.html")


@student_bp.route("/add-student", methods=["GET"])
def add_student_form():
    db = db_pool.connection()
    try:
        classes = list_classes(db)
    except Exception:
        current_app.logger.exception("Error fetching classes")
        return "Server Error", 500
    finally:
        db.close()
    return render_template(
        "add_student.html",
        classes=classes,
        success=request.args.get("success"),
        error=request.args.get("error"),
    )


@student_bp.route("/add-student", methods=["POST"])
def add_student():
    name = (request.form.get("name") or "").strip()
    class_id = optional_int(request.form.get("classId"))
    if not name or class_id is None:
        return redirect(url_for(".add_student_form", error="All fields are required."), code=303)

    db = db_pool.connection()
    try:
        student_id = insert_student(db, name, class_id)
    except Exception:
        current_app.logger.exception("Error adding student")
        return redirect(url_for(".add_student_form", error="Failed to add student."), code=303)
    finally:
        db.close()
    current_app.logger.info("Student %s added to class %s", student_id, class_id)
    return redirect(url_for(".add_student_form", success="Student added successfully."), code=303)


@student_bp.route("/edit-student/<int:student_id>")
def edit_student(student_id: int):
    db = db_pool.connection()
    try:
        student = get_student(db, student_id)
        classes = list_classes(db)
    except Exception:
        current_app.logger.exception("Error fetching student %s", student_id)
        return "Server Error", 500
    finally:
        db.close()
    if student is None:
        abort(404)
    return render_template("edit_student.html", student=student, classes=classes, error=request.args.get("error"))


@student_bp.route("/update-student/<int:student_id>", methods=["POST"])
def update_student(student_id: int):
    name = (request.form.get("name") or "").strip()
    class_id = optional_int(request.form.get("classId"))
    if not name or class_id is None:
        return redirect(
            url_for(".edit_student", student_id=student_id, error="All fields are required."), code=303
        )

    db = db_pool.connection()
    try:
        save_student(db, student_id, name, class_id)
    except Exception:
        current_app.logger.exception("Error updating student %s", student_id)
        return "Server Error", 500
    finally:
        db.close()
    return redirect(url_for("dashboard"), code=303)


@student_bp.route("/delete-student/<int:student_id>", methods=["POST"])
def delete_student(student_id: int):
    db = db_pool.connection()
    try:
        remove_student(db, student_id)
    except Exception:
        current_app.logger.exception("Error deleting student %s", student_id)
        return "Server Error", 500
    finally:
        db.close()
    current_app.logger.info("Student %s deleted with their payments", student_id)
    return redirect(url_for(".view_student"), code=303)
