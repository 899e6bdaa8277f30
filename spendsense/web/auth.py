# spendsense/web/auth.py
import sys
from typing import Any, Dict, Optional

from flask import current_app, g, jsonify, request, session

from spendsense.core.context import RequestContext
from spendsense.core.models import ActionResult

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"


def remember_session(auth_session: Any) -> None:
    """Keeps the Supabase tokens in the signed Flask session cookie."""
    session[ACCESS_TOKEN_KEY] = auth_session.access_token
    session[REFRESH_TOKEN_KEY] = auth_session.refresh_token


def forget_session() -> None:
    session.pop(ACCESS_TOKEN_KEY, None)
    session.pop(REFRESH_TOKEN_KEY, None)
    g.pop("request_context", None)


def get_request_context() -> RequestContext:
    """Builds (once per request) the client and user every store call is scoped to.

    set_session validates the stored access token and, when it has expired,
    refreshes it with the refresh token; the new pair is written back to the
    session. Any failure leaves the request anonymous.
    """
    if "request_context" in g:
        return g.request_context

    client = current_app.config["SUPABASE_CLIENT_FACTORY"]()
    access_token = session.get(ACCESS_TOKEN_KEY)
    refresh_token = session.get(REFRESH_TOKEN_KEY)
    user = None

    if access_token and refresh_token:
        try:
            response = client.auth.set_session(access_token, refresh_token)
            user = response.user
            if response.session is not None:
                if response.session.access_token != access_token:
                    remember_session(response.session)
                client.postgrest.auth(response.session.access_token)
            else:
                client.postgrest.auth(access_token)
        except Exception as e:
            print(f"ERROR: Could not restore Supabase session: {e}", file=sys.stderr)
            forget_session()
            user = None

    g.request_context = RequestContext.from_user(client, user)
    return g.request_context


def json_body() -> Dict[str, Any]:
    """JSON payload or submitted form fields, whichever the request carries."""
    if request.is_json:
        payload = request.get_json(silent=True)
        return payload if isinstance(payload, dict) else {}
    return request.form.to_dict()


def result_response(result: ActionResult, ok_status: int = 200, payload: Optional[Dict[str, Any]] = None):
    """Maps an ActionResult onto a JSON response and status code."""
    if result.success:
        body = {"success": True, "error": None}
        body.update(payload or {})
        return jsonify(body), ok_status
    if result.is_not_authenticated:
        status = 401
    elif result.invalid_input:
        status = 400
    else:
        status = 500
    return jsonify({"success": False, "error": result.error}), status
