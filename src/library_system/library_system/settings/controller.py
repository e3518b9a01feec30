from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import admin_required
from ..container import Container
from ..core.exceptions import RemoteStoreError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/settings", methods=["GET", "POST"], endpoint="admin_settings")
    @admin_required
    def admin_settings():
        if request.method == "POST":
            form = request.form
            try:
                container.settings_service.update(
                    library_name=form.get("library_name", ""),
                    total_seats=form.get("total_seats"),
                    opening_time=form.get("opening_time", ""),
                    closing_time=form.get("closing_time", ""),
                    qr_attendance_enabled="qr_attendance_enabled" in form,
                    auto_checkout_enabled="auto_checkout_enabled" in form,
                    email_notifications="email_notifications" in form,
                    notice_text=form.get("notice_text", ""),
                )
                flash("Library settings have been updated successfully.", "success")
                return redirect(url_for("admin_settings"))
            except ValidationError as e:
                flash(str(e), "danger")
            except RemoteStoreError as e:
                app.logger.exception("Saving settings failed")
                flash(f"Failed to save settings: {e}", "danger")

        settings = None
        try:
            settings = container.settings_service.get()
        except RemoteStoreError as e:
            app.logger.exception("Could not load settings")
            flash(f"Could not load settings: {e}", "danger")
        return render_template("admin/settings.html", settings=settings, active_page="admin_settings")
