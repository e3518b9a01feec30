from __future__ import annotations

import io

import qrcode
from flask import Flask, flash, g, jsonify, redirect, render_template, request, send_file, url_for
from PIL import Image

from ..common.web import admin_required, login_required
from ..container import Container
from ..core.enums import AttendanceAction
from ..core.exceptions import RemoteStoreError, ValidationError


def _qr_png(data: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    buf = io.BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(buf, format="PNG")
    buf.seek(0)
    return buf


def _decode_qr(img: Image.Image) -> list[bytes]:
    """Raw payloads of every QR code found in the image."""

    # needs the zbar shared library at runtime
    from pyzbar.pyzbar import decode as pyzbar_decode

    return [d.data for d in pyzbar_decode(img)]


def register(app: Flask, container: Container) -> None:
    _messages = {
        AttendanceAction.CHECK_IN: "You have successfully checked into the library.",
        AttendanceAction.CHECK_OUT: "You have successfully checked out of the library.",
    }

    def _qr_toggle(scanned_code: str):
        if not container.settings_service.get().qr_attendance_enabled:
            return jsonify({"success": False, "message": "QR attendance is disabled"}), 403
        if scanned_code != app.config.get("QR_TOKEN"):
            return jsonify({"success": False, "message": "Invalid or expired QR code"}), 400

        action = container.attendance_service.toggle(g.current_user.user_id)
        return jsonify({"success": True, "action": action.value, "message": _messages[action]}), 200

    @app.route("/student", endpoint="student_dashboard")
    @login_required
    def student_dashboard():
        user_id = g.current_user.user_id
        profile, snapshot, history, settings = None, None, [], None
        try:
            profile = container.user_service.get_profile(user_id)
            snapshot = container.attendance_service.get_snapshot(user_id)
            history = container.attendance_service.get_history_ui(user_id)
            settings = container.settings_service.get()
        except RemoteStoreError as e:
            app.logger.exception("Could not load dashboard for user %s", user_id)
            flash(f"Could not load attendance: {e}", "danger")

        return render_template(
            "student_dashboard.html",
            profile=profile,
            is_checked_in=bool(snapshot and snapshot.is_checked_in),
            latest=snapshot.latest if snapshot else None,
            history=history,
            settings=settings,
            active_page="student_dashboard",
        )

    @app.route("/checkin", methods=["POST"], endpoint="checkin")
    @login_required
    def checkin():
        try:
            container.attendance_service.check_in(g.current_user.user_id, purpose=request.form.get("purpose"))
            flash(_messages[AttendanceAction.CHECK_IN], "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except RemoteStoreError as e:
            app.logger.exception("Check-in failed")
            flash(f"Check-in failed: {e}", "danger")
        return redirect(url_for("student_dashboard"))

    @app.route("/checkout", methods=["POST"], endpoint="checkout")
    @login_required
    def checkout():
        user_id = g.current_user.user_id
        try:
            attendance_id = request.form.get("attendance_id", type=int)
            if attendance_id is None:
                latest = container.attendance_service.get_snapshot(user_id, limit=1).latest
                if latest is None:
                    raise ValidationError("You are not checked in")
                attendance_id = latest.attendance_id

            container.attendance_service.check_out(user_id, attendance_id)
            flash(_messages[AttendanceAction.CHECK_OUT], "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except RemoteStoreError as e:
            app.logger.exception("Check-out failed")
            flash(f"Check-out failed: {e}", "danger")
        return redirect(url_for("student_dashboard"))

    @app.route("/qr/scan", endpoint="qr_scan_page")
    @login_required
    def qr_scan_page():
        return render_template("qr_scan.html", active_page="qr_scan")

    @app.route("/api/qr/checkin", methods=["POST"], endpoint="api_qr_checkin")
    @login_required
    def api_qr_checkin():
        """Scanned token in, check-in or check-out depending on current status."""

        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({"success": False, "message": "Expected a JSON object"}), 400

        scanned_code = str(data.get("code", "")).strip()
        if not scanned_code:
            return jsonify({"success": False, "message": "QR code must not be empty"}), 400

        try:
            return _qr_toggle(scanned_code)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except RemoteStoreError as e:
            app.logger.exception("QR check-in failed")
            return jsonify({"success": False, "message": f"Attendance failed: {e}"}), 502

    @app.route("/api/qr/checkin/image", methods=["POST"], endpoint="api_qr_checkin_image")
    @login_required
    def api_qr_checkin_image():
        """Same as api_qr_checkin, but decodes the code from an uploaded photo."""

        if "image" not in request.files:
            return jsonify({"success": False, "message": "Missing image file"}), 400

        try:
            img = Image.open(request.files["image"].stream).convert("RGB")
        except OSError:
            return jsonify({"success": False, "message": "Unreadable image"}), 400

        decoded = _decode_qr(img)
        if not decoded:
            return jsonify({"success": False, "message": "No QR code found in image"}), 400

        try:
            scanned_code = decoded[0].decode("utf-8").strip()
        except UnicodeDecodeError:
            return jsonify({"success": False, "message": "Invalid or expired QR code"}), 400

        try:
            return _qr_toggle(scanned_code)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except RemoteStoreError as e:
            app.logger.exception("QR image check-in failed")
            return jsonify({"success": False, "message": f"Attendance failed: {e}"}), 502

    @app.route("/admin/qr/image", endpoint="admin_qr_image")
    @admin_required
    def admin_qr_image():
        """Printable library QR code for the entrance."""
        return send_file(_qr_png(app.config.get("QR_TOKEN", "LIBRARY_CHECKIN")), mimetype="image/png")
