from __future__ import annotations

from flask import Flask, flash, g, jsonify, redirect, render_template, request, session, url_for

from ..common.web import admin_required
from ..container import Container
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, RemoteStoreError, ValidationError


def register(app: Flask, container: Container) -> None:
    def _home_for(user):
        return redirect(url_for("admin_dashboard" if user.is_admin else "student_dashboard"))

    def _notice() -> str:
        try:
            return container.settings_service.get().notice_text
        except RemoteStoreError:
            app.logger.exception("Could not load notice text")
            return ""

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if g.current_user is not None:
            return _home_for(g.current_user)

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")

            try:
                user = container.auth_service.sign_in(email, password)

                session.clear()
                session.permanent = bool(request.form.get("remember_me"))
                session["user_id"] = user.user_id

                flash("Signed in successfully.", "success")
                return _home_for(user)
            except AuthenticationError as e:
                flash(str(e), "danger")
            except RemoteStoreError as e:
                app.logger.exception("Sign-in failed")
                flash(f"Sign-in failed: {e}", "danger")

        return render_template("login.html", notice=_notice())

    @app.route("/signup", methods=["GET", "POST"], endpoint="signup")
    def signup():
        if g.current_user is not None:
            return _home_for(g.current_user)

        if request.method == "POST":
            try:
                container.auth_service.sign_up(
                    full_name=request.form.get("fullName", ""),
                    email=request.form.get("email", ""),
                    student_id=request.form.get("studentId", ""),
                    password=request.form.get("password", ""),
                    phone=request.form.get("phone"),
                )
                flash("Account created. Please sign in.", "success")
                return redirect(url_for("login"))
            except ValidationError as e:
                flash(str(e), "danger")
            except RemoteStoreError as e:
                app.logger.exception("Sign-up failed")
                flash(f"Sign-up failed: {e}", "danger")

        return render_template("signup.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("You have been signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/admin/students", endpoint="admin_students")
    @admin_required
    def admin_students():
        students, admins, occupancy = [], [], None
        try:
            students = container.user_service.list_students()
            admins = container.user_service.list_admins()
            occupancy = container.occupancy_service.snapshot()
        except RemoteStoreError as e:
            app.logger.exception("Could not load students")
            flash(f"Could not load students: {e}", "danger")

        return render_template(
            "admin/students.html",
            students=students,
            admins=admins,
            occupancy=occupancy,
            active_page="admin_students",
        )

    @app.route("/admin/students/add", methods=["POST"], endpoint="add_student")
    @admin_required
    def add_student():
        try:
            container.user_service.create_student(
                current_user=g.current_user,
                full_name=request.form.get("fullName", ""),
                email=request.form.get("email", ""),
                student_id=request.form.get("studentId", ""),
                password=request.form.get("password", ""),
                seat_number=request.form.get("seatNumber"),
                phone=request.form.get("phone"),
            )
            flash("Student added.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except RemoteStoreError as e:
            app.logger.exception("Add student failed")
            flash(f"Could not add student: {e}", "danger")
        return redirect(url_for("admin_students"))

    @app.route("/admin/admins/add", methods=["POST"], endpoint="add_admin")
    @admin_required
    def add_admin():
        try:
            container.user_service.create_admin(
                current_user=g.current_user,
                full_name=request.form.get("fullName", ""),
                email=request.form.get("email", ""),
                password=request.form.get("password", ""),
            )
            flash("Admin added.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except RemoteStoreError as e:
            app.logger.exception("Add admin failed")
            flash(f"Could not add admin: {e}", "danger")
        return redirect(url_for("admin_students"))

    @app.route("/admin/students/delete/<int:user_id>", methods=["POST"], endpoint="delete_student")
    @admin_required
    def delete_student(user_id: int):
        try:
            container.user_service.delete_user(current_user=g.current_user, user_id=user_id)
            flash("Student deleted.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except RemoteStoreError as e:
            app.logger.exception("Delete user %s failed", user_id)
            flash(f"Could not delete student: {e}", "danger")
        return redirect(url_for("admin_students"))

    @app.route("/functions/delete-user", methods=["POST"], endpoint="fn_delete_user")
    def fn_delete_user():
        """Privileged deletion endpoint: {"user_id": <id>}."""

        if g.current_user is None:
            return jsonify({"success": False, "message": "Not signed in"}), 401

        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({"success": False, "message": "Expected a JSON object"}), 400

        try:
            user_id = int(data.get("user_id"))
        except (TypeError, ValueError):
            return jsonify({"success": False, "message": "user_id is required"}), 400

        try:
            container.user_service.delete_user(current_user=g.current_user, user_id=user_id)
            return jsonify({"success": True, "message": "User deleted"}), 200
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except DomainError as e:
            app.logger.exception("delete-user failed for %s", user_id)
            return jsonify({"success": False, "message": str(e)}), 502
