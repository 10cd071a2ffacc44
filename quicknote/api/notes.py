import json
import logging
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse, Response
from pydantic import ValidationError

from quicknote.api.pages import render_note_page
from quicknote.config import BASE_PATH
from quicknote.exceptions import InvalidRequestBody, NoteStorageError
from quicknote.models.notes import MutationResult, NoteUpdate
from quicknote.storage.notes_store import NoteMetadata, NotesStore
from quicknote.utils.auth_hash import hash_password, verify_password
from quicknote.utils.note_names import generate_note_name, is_valid_note_name

logger = logging.getLogger(__name__)

router = APIRouter(prefix=BASE_PATH, tags=["notes"])

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
READ_METHODS = [m for m in ALL_METHODS if m != "POST"]

RAW_USER_AGENT_PREFIXES = ("curl", "Wget")
PROTECTED_RAW_MESSAGE = "This note is password protected. Open it in a browser to view it."


def get_store(request: Request) -> NotesStore:
    return request.app.state.store


def redirect_to_new_note() -> RedirectResponse:
    return RedirectResponse(f"{BASE_PATH}/{generate_note_name()}", status_code=302)


def _result(success: bool, reason: str | None = None, status_code: int = 200) -> JSONResponse:
    body = MutationResult(success=success, reason=reason)
    return JSONResponse(body.model_dump(exclude_none=True), status_code=status_code)


async def note_update(request: Request) -> NoteUpdate:
    """Parse a JSON or form-encoded POST body into a NoteUpdate.

    Other content types carry no fields, the same as an empty body.
    """
    if not is_valid_note_name(request.path_params.get("note_name")):
        # the route redirects these without looking at the body
        return NoteUpdate()

    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    raw = await request.body()

    fields: object = {}
    if content_type == "application/json" and raw:
        try:
            fields = json.loads(raw)
        except ValueError:
            raise InvalidRequestBody(context={"reason": "invalid JSON"})
    elif content_type == "application/x-www-form-urlencoded":
        try:
            fields = dict(parse_qsl(raw.decode("utf-8"), keep_blank_values=True))
        except UnicodeDecodeError:
            raise InvalidRequestBody(context={"reason": "form body is not UTF-8"})

    if not isinstance(fields, dict):
        raise InvalidRequestBody(context={"reason": "body is not an object"})
    try:
        return NoteUpdate.model_validate(fields)
    except ValidationError as exc:
        # field names only, error text would echo passwords
        fields_in_error = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise InvalidRequestBody(context={"reason": f"bad fields: {', '.join(fields_in_error)}"})


def wants_raw(request: Request) -> bool:
    if "raw" in request.query_params:
        return True
    user_agent = request.headers.get("user-agent", "")
    return user_agent.startswith(RAW_USER_AGENT_PREFIXES)


@router.api_route("", methods=ALL_METHODS)
def new_note() -> RedirectResponse:
    return redirect_to_new_note()


@router.post("/{note_name}")
def update_note(
    note_name: str,
    update: NoteUpdate = Depends(note_update),
    store: NotesStore = Depends(get_store),
) -> Response:
    if not is_valid_note_name(note_name):
        return redirect_to_new_note()

    meta = store.read_metadata(note_name)

    # passwordVerified is the editor's word that it already unlocked the note
    if meta.has_password and not update.password_verified:
        if not update.password:
            return _result(False, "password required", status_code=401)
        if not verify_password(update.password, meta.password_hash):
            return _result(False, "incorrect password", status_code=401)
        if update.is_verify_only:
            return _result(True)

    if update.password:
        store.write_metadata(note_name, NoteMetadata(has_password=True, password_hash=hash_password(update.password)))
        logger.info("Password set for note %s", note_name)
    elif update.wants_clear_password:
        store.write_metadata(note_name, NoteMetadata(has_password=False))
        logger.info("Password cleared for note %s", note_name)

    if update.has_text:
        store.write_content(note_name, update.text or "")

    return _result(True)


@router.api_route("/{note_name}", methods=READ_METHODS)
def read_note(note_name: str, request: Request, store: NotesStore = Depends(get_store)) -> Response:
    if not is_valid_note_name(note_name):
        return redirect_to_new_note()

    meta = store.read_metadata(note_name)

    if wants_raw(request):
        if meta.has_password:
            return PlainTextResponse(PROTECTED_RAW_MESSAGE, status_code=401)
        content = store.read_content(note_name)
        if content is None:
            return Response(status_code=404)
        return PlainTextResponse(content)

    # The page carries the content even for protected notes; the editor
    # keeps it hidden until the password is verified.
    try:
        content = store.read_content(note_name) or ""
    except NoteStorageError:
        logger.exception("Could not read note %s for the editor page", note_name)
        content = ""

    return HTMLResponse(render_note_page(note_name, content, meta.has_password))
