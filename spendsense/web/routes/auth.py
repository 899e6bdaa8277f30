# spendsense/web/routes/auth.py
from flask import Blueprint, jsonify

from spendsense.utils.text_utils import clean_text
from spendsense.web.auth import forget_session, get_request_context, json_body, remember_session

bp = Blueprint("auth", __name__, url_prefix="/auth")

MIN_PASSWORD_LENGTH = 6


@bp.route("/register", methods=["POST"])
def register():
    """Creates a Supabase auth user with a username in its metadata."""
    form = json_body()
    email = clean_text(form.get("email")).lower()
    password = form.get("password") or ""
    username = clean_text(form.get("username"))

    if not email or not password or not username:
        return jsonify({"success": False, "error": "All fields are required"}), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"success": False, "error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}), 400
    if len(username) < 2:
        return jsonify({"success": False, "error": "Username must be at least 2 characters"}), 400

    client = get_request_context().client
    try:
        response = client.auth.sign_up({
            "email": email,
            "password": password,
            "options": {"data": {"username": username}},
        })
    except Exception as e:
        print(f"Error registering user with Supabase: {e}")
        return jsonify({"success": False, "error": str(e)}), 400

    # With email confirmation enabled Supabase returns no session yet
    if response.session is not None:
        remember_session(response.session)

    return jsonify({
        "success": True,
        "error": None,
        "user_id": response.user.id if response.user else None,
        "confirmation_required": response.session is None,
    }), 201


@bp.route("/login", methods=["POST"])
def login():
    form = json_body()
    email = clean_text(form.get("email")).lower()
    password = form.get("password") or ""
    if not email or not password:
        return jsonify({"success": False, "error": "Email and password are required"}), 400

    client = get_request_context().client
    try:
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        print(f"Login failed for {email}: {e}")
        return jsonify({"success": False, "error": "Invalid email or password"}), 401

    remember_session(response.session)
    return jsonify({
        "success": True,
        "error": None,
        "user": {"id": response.user.id, "email": response.user.email},
    })


@bp.route("/logout", methods=["POST"])
def logout():
    ctx = get_request_context()
    if ctx.is_authenticated:
        try:
            ctx.client.auth.sign_out()
        except Exception as e:
            print(f"Error signing out of Supabase: {e}")
    forget_session()
    return jsonify({"success": True, "error": None})
