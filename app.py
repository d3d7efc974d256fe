from flask import Flask, render_template, request, g
import logging
import uuid

import click
from werkzeug.middleware.proxy_fix import ProxyFix

from config import Config
from extensions import db_pool
from routes.class_routes import class_bp
from routes.fee_routes import fee_bp
from routes.report_routes import report_bp
from routes.student_routes import student_bp
from utils.reports import dashboard_summary, format_money
from utils.schema import ensure_core_tables

app = Flask(__name__)

# Load configuration from Config (falls back to sensible defaults inside Config)
app.config.from_object(Config)

logging.basicConfig(
    level=app.config["LOG_LEVEL"],
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
app.logger.setLevel(app.config["LOG_LEVEL"])

# Trust reverse proxy headers for scheme/host when enabled
if app.config.get("TRUST_PROXY"):
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)  # type: ignore[method-assign]

db_pool.init_app(app)

app.register_blueprint(student_bp)
app.register_blueprint(fee_bp)
app.register_blueprint(class_bp)
app.register_blueprint(report_bp)

app.jinja_env.filters["money"] = format_money


# Assign a per-request correlation id for tracing
@app.before_request
def _assign_request_id():
    g.request_id = uuid.uuid4().hex[:16]


@app.after_request
def _set_security_headers(resp):
    resp.headers.setdefault("X-Content-Type-Options", "nosniff")
    resp.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    request_id = getattr(g, "request_id", None)
    if request_id:
        resp.headers.setdefault("X-Request-ID", request_id)
    return resp


# Sidebar highlighting in base.html
@app.context_processor
def _inject_current_path():
    return {"currentPath": request.path}


@app.errorhandler(500)
def _server_error(err):
    app.logger.error("Unhandled error (request %s): %s", getattr(g, "request_id", "-"), err)
    return "Server Error", 500


@app.route("/")
def dashboard():
    """Dashboard cards: students, expected fees, amount paid and outstanding balance."""
    db = db_pool.connection()
    try:
        summary = dashboard_summary(db)
    except Exception:
        app.logger.exception("Error fetching dashboard totals")
        return "Server Error", 500
    finally:
        db.close()
    return render_template("index.html", **summary)


@app.cli.command("init-db")
def init_db_command():
    """Create the classes, students and payments tables if missing."""
    conn = db_pool.connection()
    try:
        ensure_core_tables(conn)
    finally:
        conn.close()
    click.echo("Database tables ready.")


def main():
    # Open the pool up front so a bad DB config fails at startup, not on first request.
    db_pool.open()
    app.run(host="0.0.0.0", port=app.config["PORT"])


if __name__ == "__main__":
    main()
