# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

# Cloud function for the journal backend - one HTTPS endpoint that routes
# every resource over the Firestore store.
#
# This file containing Python cloud functions must be named main.py.
# See https://cloud.google.com/run/docs/write-functions#python for more info.

# Standard library imports
import json
import re
from typing import Any, Callable, Optional

# Third-party library imports
from firebase_admin import initialize_app, firestore
from firebase_functions import https_fn, logger, options

# Local application imports
from journal_backend import attendance, auth, journals, seeding, users
from journal_backend.app_settings import SettingsService
from journal_backend.config import get_settings
from journal_backend.db import DbClient
from journal_backend.errors import JournalApiError, MethodNotAllowed, NotFoundError, ValidationError
from journal_backend.firestore_db import FirestoreDbClient
from journal_backend.schemas import (
    AppSettings,
    AttendanceRequest,
    JournalEntry,
    JournalEntryCreate,
    JournalReview,
    JournalRevision,
    LoginRequest,
    dump,
    parse_payload,
)
from journal_shared.types import JournalStatus

RESET_ACTION = "reset_application_data"
API_PREFIX = "/api"

initialize_app()

_db_client: Optional[DbClient] = None
_settings_service: Optional[SettingsService] = None


def get_db_client() -> DbClient:
    global _db_client
    if _db_client is None:
        _db_client = FirestoreDbClient(firestore.client())
    return _db_client


def get_settings_service(db: DbClient) -> SettingsService:
    global _settings_service
    if _settings_service is None or _settings_service.db is not db:
        _settings_service = SettingsService(db)
    return _settings_service


def _now():
    return journals.local_now(get_settings().timezone)


def _json_response(
    body: Any, status: int = 200, headers: Optional[dict] = None
) -> https_fn.Response:
    return https_fn.Response(
        json.dumps(body),
        status=status,
        headers=headers,
        mimetype="application/json",
    )


def _message(message: str, status: int = 200) -> https_fn.Response:
    return _json_response({"message": message}, status)


def _no_content() -> https_fn.Response:
    return https_fn.Response(status=204)


def _body(req: https_fn.Request) -> Any:
    body = req.get_json(silent=True)
    if body is None:
        raise ValidationError("Bad request: request body must be JSON.")
    return body


def _query_id(req: https_fn.Request) -> str:
    item_id = req.args.get("id")
    if not item_id:
        raise ValidationError("Bad request: Missing or invalid id.")
    return item_id


# Users


def _list_users(req, db):
    return _json_response(dump(users.list_users(db)))


def _create_user(req, db):
    user = users.create_user(db, users.parse_user(_body(req)))
    return _json_response(dump(user), 201)


def _import_users(req, db):
    rows = _body(req)
    if not isinstance(rows, list):
        raise ValidationError("Bad request: expected a list of users.")
    result = users.import_users(db, rows)
    return _json_response(
        {
            "imported": result.imported,
            "failed": result.failed,
            "errors": dump(result.errors),
            "users": dump(result.users),
        }
    )


def _update_user(req, db, user_id=None):
    user = users.update_user(db, users.parse_user(_body(req)), path_id=user_id)
    return _json_response(dump(user))


def _delete_users(req, db):
    action = req.args.get("action")
    if action == RESET_ACTION:
        seeding.reset_application_data(db, get_settings_service(db))
        return _message("Application data has been reset successfully.")
    if action:
        raise ValidationError(f"Bad request: unknown action {action}.")
    users.delete_user(db, _query_id(req))
    return _no_content()


def _delete_user(req, db, user_id):
    users.delete_user(db, user_id)
    return _no_content()


# Journals


def _list_journals(req, db):
    status = req.args.get("status")
    if status and status not in set(JournalStatus):
        raise ValidationError(f"Bad request: unknown status {status}.")
    entries = journals.list_journals(
        db,
        student_id=req.args.get("studentId"),
        status=status,
        date=req.args.get("date"),
    )
    return _json_response(dump(entries))


def _create_journal(req, db):
    payload = parse_payload(JournalEntryCreate, _body(req))
    return _json_response(dump(journals.create_journal(db, payload, _now())), 201)


def _replace_journal(req, db, journal_id=None):
    entry = parse_payload(JournalEntry, _body(req))
    return _json_response(
        dump(journals.replace_journal(db, entry, path_id=journal_id))
    )


def _revise_journal(req, db, journal_id):
    revision = parse_payload(JournalRevision, _body(req))
    return _json_response(dump(journals.revise_journal(db, journal_id, revision)))


def _review_journal(req, db, journal_id):
    review = parse_payload(JournalReview, _body(req))
    return _json_response(dump(journals.review_journal(db, journal_id, review)))


def _delete_journal_by_query(req, db):
    journals.delete_journal(db, _query_id(req))
    return _no_content()


def _delete_journal(req, db, journal_id):
    journals.delete_journal(db, journal_id)
    return _no_content()


# Login, settings, seeding, attendance and backup


def _login(req, db):
    user = auth.login(db, parse_payload(LoginRequest, _body(req)))
    return _json_response(dump(user))


def _journal_categories(req, db):
    return _json_response(get_settings_service(db).categories())


def _get_app_settings(req, db):
    return _json_response(dump(get_settings_service(db).get()))


def _update_app_settings(req, db):
    settings = parse_payload(AppSettings, _body(req))
    return _json_response(dump(get_settings_service(db).update(settings)))


def _seed_data(req, db):
    result = seeding.seed_all(db)
    if result.categories:
        get_settings_service(db).reload()
    return _json_response(
        {"message": "Data seeding process completed.", "seeded": result.as_dict()}
    )


def _attendance_status(req, db):
    settings = get_settings_service(db).get()
    return _json_response(dump(attendance.attendance_status(settings, _now())))


def _record_attendance(req, db):
    request = parse_payload(AttendanceRequest, _body(req))
    settings = get_settings_service(db).get()
    entry = attendance.record_attendance(db, settings, request, _now())
    return _json_response(dump(entry), 201)


def _backup(req, db):
    return _json_response(
        {
            "users": dump(users.list_users(db)),
            "journals": dump(journals.list_journals(db)),
            "settings": dump(get_settings_service(db).get()),
        }
    )


Handler = Callable[..., https_fn.Response]

# Order matters: literal segments must precede the id captures.
ROUTES: list[tuple[re.Pattern, dict[str, Handler]]] = [
    (
        re.compile(r"^/users$"),
        {
            "GET": _list_users,
            "POST": _create_user,
            "PUT": _update_user,
            "DELETE": _delete_users,
        },
    ),
    (re.compile(r"^/users/import$"), {"POST": _import_users}),
    (
        re.compile(r"^/users/(?P<user_id>[^/]+)$"),
        {"PUT": _update_user, "DELETE": _delete_user},
    ),
    (
        re.compile(r"^/journals$"),
        {
            "GET": _list_journals,
            "POST": _create_journal,
            "PUT": _replace_journal,
            "DELETE": _delete_journal_by_query,
        },
    ),
    (
        re.compile(r"^/journals/(?P<journal_id>[^/]+)/review$"),
        {"POST": _review_journal},
    ),
    (
        re.compile(r"^/journals/(?P<journal_id>[^/]+)$"),
        {
            "PUT": _replace_journal,
            "PATCH": _revise_journal,
            "DELETE": _delete_journal,
        },
    ),
    (re.compile(r"^/login$"), {"POST": _login}),
    (re.compile(r"^/journal-categories$"), {"GET": _journal_categories}),
    (
        re.compile(r"^/settings$"),
        {"GET": _get_app_settings, "PUT": _update_app_settings},
    ),
    (re.compile(r"^/seed-data$"), {"POST": _seed_data}),
    (re.compile(r"^/attendance/status$"), {"GET": _attendance_status}),
    (re.compile(r"^/attendance$"), {"POST": _record_attendance}),
    (re.compile(r"^/backup$"), {"GET": _backup}),
]


def _normalize_path(path: str) -> str:
    if path.startswith(API_PREFIX + "/"):
        path = path[len(API_PREFIX) :]
    return path.rstrip("/") or "/"


def _dispatch(req: https_fn.Request) -> https_fn.Response:
    path = _normalize_path(req.path)
    for pattern, handlers in ROUTES:
        match = pattern.match(path)
        if not match:
            continue
        handler = handlers.get(req.method)
        if handler is None:
            raise MethodNotAllowed(req.method, handlers.keys())
        return handler(req, get_db_client(), **match.groupdict())
    raise NotFoundError(f"No route for {path}")


@https_fn.on_request(
    cors=options.CorsOptions(
        cors_origins="*",
        cors_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    ),
    memory=options.MemoryOption.MB_512,
)
def api(req: https_fn.Request) -> https_fn.Response:
    """
    Single HTTPS entry point for the journal API.

    Paths may carry an ``/api`` prefix (Hosting rewrites) or not. Errors are
    returned as ``{"message": ...}`` with the matching status code.
    """
    try:
        return _dispatch(req)
    except JournalApiError as e:
        if e.status_code >= 500:
            logger.error(f"{req.method} {req.path} failed: {e.message}")
        headers = None
        if isinstance(e, MethodNotAllowed):
            headers = {"Allow": ", ".join(e.allowed)}
        return _json_response(e.as_dict(), e.status_code, headers)
    except Exception as e:
        logger.error(f"Unexpected error handling {req.method} {req.path}: {e}")
        return _message("Internal server error.", 500)
