from __future__ import annotations

import csv
import io
from datetime import date

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import admin_required
from ..container import Container
from ..core.exceptions import RemoteStoreError, ValidationError

CSV_FIELDS = [
    "date",
    "user_id",
    "full_name",
    "student_id",
    "seat_number",
    "check_in",
    "check_out",
    "duration",
    "purpose",
]


def register(app: Flask, container: Container) -> None:
    def _range_from_args() -> tuple[date, date]:
        today = now_local().date()
        try:
            start = parse_iso_date(request.args["start"]) if request.args.get("start") else today
            end = parse_iso_date(request.args["end"]) if request.args.get("end") else start
        except ValueError:
            raise ValidationError("Dates must use YYYY-MM-DD")
        return start, end

    @app.route("/admin", endpoint="admin_dashboard")
    @admin_required
    def admin_dashboard():
        stats = None
        try:
            stats = container.stats_service.dashboard()
        except RemoteStoreError as e:
            app.logger.exception("Could not load dashboard stats")
            flash(f"Could not load statistics: {e}", "danger")
        return render_template("admin/dashboard.html", stats=stats, active_page="admin_dashboard")

    @app.route("/admin/attendance", endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        today = now_local().date()
        start, end, data = today, today, None
        try:
            start, end = _range_from_args()
            data = container.report_service.build(start=start, end=end)
        except ValidationError as e:
            flash(str(e), "warning")
        except RemoteStoreError as e:
            app.logger.exception("Could not load attendance report")
            flash(f"Could not load attendance: {e}", "danger")

        return render_template(
            "admin/attendance.html",
            start=start.strftime("%Y-%m-%d"),
            end=end.strftime("%Y-%m-%d"),
            data=data,
            active_page="admin_attendance",
        )

    @app.route("/admin/attendance.csv", endpoint="admin_attendance_csv")
    @admin_required
    def admin_attendance_csv():
        try:
            start, end = _range_from_args()
            data = container.report_service.build(start=start, end=end)
        except ValidationError as e:
            flash(str(e), "warning")
            return redirect(url_for("admin_attendance"))
        except RemoteStoreError as e:
            app.logger.exception("CSV export failed")
            flash(f"Export failed: {e}", "danger")
            return redirect(url_for("admin_attendance"))

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        filename = f"attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
