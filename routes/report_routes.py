from __future__ import annotations

from flask import Blueprint, Response, current_app, render_template, request

from extensions import db_pool
from utils import optional_int
from utils.classes import list_classes
from utils.pdf import html_to_pdf
from utils.reports import build_report_context

report_bp = Blueprint("reports", __name__)


@report_bp.route("/pdf")
def report_picker():
    db = db_pool.connection()
    try:
        classes = list_classes(db)
    except Exception:
        current_app.logger.exception("Error fetching classes")
        return "Server Error", 500
    finally:
        db.close()
    return render_template("report_picker.html", classes=classes)


@report_bp.route("/students/pdf")
def students_pdf():
    """Fee status of a class (or every student) as an inline A4 PDF."""
    class_id = optional_int(request.args.get("classId"))

    db = db_pool.connection()
    try:
        context = build_report_context(db, class_id)
    except Exception:
        current_app.logger.exception("Error collecting report data")
        return "Error generating PDF", 500
    finally:
        db.close()

    try:
        html = render_template("pdf_report.html", title=current_app.config["REPORT_TITLE"], **context)
    except Exception:
        current_app.logger.exception("Report template render error")
        return "Error generating PDF", 500

    try:
        pdf_bytes = html_to_pdf(html, page_format="A4", timeout_ms=current_app.config["PDF_RENDER_TIMEOUT_MS"])
    except Exception:
        current_app.logger.exception("Headless browser PDF error")
        return "Error generating PDF", 500

    return Response(
        pdf_bytes,
        mimetype="application/pdf",
        headers={"Content-Disposition": "inline; filename=student_report.pdf"},
    )
