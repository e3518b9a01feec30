from __future__ import annotations

from functools import wraps

from flask import flash, g, redirect, url_for

from ..core.enums import Role


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if g.get("current_user") is None:
            flash("Please sign in to continue.", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    """Non-admins are sent back to the student dashboard."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        user = g.get("current_user")
        if user is None:
            return redirect(url_for("login"))
        if user.role != Role.ADMIN:
            flash("Admin access required.", "warning")
            return redirect(url_for("student_dashboard"))
        return view(*args, **kwargs)

    return wrapper
