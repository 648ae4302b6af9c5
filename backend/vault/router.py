# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Vault endpoints – CRUD for credential records, on-demand reveal, breach
recheck, and Excel export / import.

Invariants enforced by every handler
------------------------------------
* Records are only written through :class:`vault.store.CredentialStore`, so
  strength and breach annotations always match the stored password.
* The password is only returned by the dedicated ``/reveal`` endpoint (and
  the export workbook).  All other responses carry annotations only.
"""

import io

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import StreamingResponse
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

from core.logger import get_logger
from models.credential import VALID_CATEGORIES
from vault.schemas import (
    CredentialCreate,
    CredentialListResponse,
    CredentialResponse,
    CredentialUpdate,
    ImportResponse,
    RecheckResponse,
    RevealResponse,
)
from vault.store import CredentialStore, InvalidCategory, RecordNotFound, get_store

logger = get_logger("vault")

router = APIRouter(prefix="/vault", tags=["vault"])


def _to_fields(body) -> dict:
    """Map the API's ``password`` onto the ``secret`` column."""
    fields = body.model_dump(exclude_unset=True)
    if "password" in fields:
        fields["secret"] = fields.pop("password")
    return fields


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")


def _bad_category() -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid category")


# ---------------------------------------------------------------------------
# GET /vault/items  – list entries
# ---------------------------------------------------------------------------


@router.get("/items", response_model=CredentialListResponse)
def list_items(
    search: str | None = None,
    category: str | None = None,
    store: CredentialStore = Depends(get_store),
):
    """Return all records, newest first, optionally searched / filtered."""
    if category and category not in VALID_CATEGORIES:
        raise _bad_category()
    return CredentialListResponse(items=store.list(search=search, category=category))


# ---------------------------------------------------------------------------
# POST /vault/items  – create a new entry
# ---------------------------------------------------------------------------


@router.post("/items", response_model=CredentialResponse, status_code=status.HTTP_201_CREATED)
async def create_item(body: CredentialCreate, store: CredentialStore = Depends(get_store)):
    """Score and breach-check the password, then persist the entry."""
    try:
        return await store.create(_to_fields(body))
    except InvalidCategory:
        raise _bad_category()


# ---------------------------------------------------------------------------
# GET /vault/items/{id}
# ---------------------------------------------------------------------------


@router.get("/items/{item_id}", response_model=CredentialResponse)
def get_item(item_id: str, store: CredentialStore = Depends(get_store)):
    try:
        return store.get(item_id)
    except RecordNotFound:
        raise _not_found()


# ---------------------------------------------------------------------------
# GET /vault/items/{id}/reveal  – return the stored password
# ---------------------------------------------------------------------------


@router.get("/items/{item_id}/reveal", response_model=RevealResponse)
def reveal_item(item_id: str, store: CredentialStore = Depends(get_store)):
    """Called on demand when the user clicks "Reveal".  Never logged."""
    try:
        record = store.get(item_id)
    except RecordNotFound:
        raise _not_found()
    logger.info("Password revealed | id=%s", item_id)
    return RevealResponse(password=record.secret)


# ---------------------------------------------------------------------------
# PUT /vault/items/{id}  – update an existing entry
# ---------------------------------------------------------------------------


@router.put("/items/{item_id}", response_model=CredentialResponse)
async def update_item(
    item_id: str,
    body: CredentialUpdate,
    store: CredentialStore = Depends(get_store),
):
    """
    Partial update.  Only fields that are explicitly provided change.  A new
    password is re-scored and re-checked before the row is committed.
    """
    try:
        return await store.update(item_id, _to_fields(body))
    except RecordNotFound:
        raise _not_found()
    except InvalidCategory:
        raise _bad_category()


# ---------------------------------------------------------------------------
# DELETE /vault/items/{id}
# ---------------------------------------------------------------------------


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(item_id: str, store: CredentialStore = Depends(get_store)):
    try:
        store.delete(item_id)
    except RecordNotFound:
        raise _not_found()


# ---------------------------------------------------------------------------
# POST /vault/check  – re-query the breach corpus for every entry
# ---------------------------------------------------------------------------


@router.post("/check", response_model=RecheckResponse)
async def check_all(store: CredentialStore = Depends(get_store)):
    """
    Lookups run concurrently.  One that fails keeps the entry's previous
    result; the batch as a whole never fails because of it.
    """
    summary = await store.recheck_all()
    logger.info(
        "Vault recheck | total=%d clean=%d compromised=%d unknown=%d",
        summary["total"],
        summary["clean"],
        summary["compromised"],
        summary["unknown"],
    )
    return RecheckResponse(**summary)


# ---------------------------------------------------------------------------
# GET /vault/export  – download all entries as an Excel workbook
# ---------------------------------------------------------------------------
# The exported file contains plaintext passwords and is not encrypted – the
# user should keep it safe.

_HEADER_FONT  = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
_HEADER_FILL  = PatternFill(start_color="6C63FF", end_color="6C63FF", fill_type="solid")
_HEADER_ALIGN = Alignment(horizontal="center", vertical="center")
_THIN_BORDER  = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)

_EXPORT_HEADERS = ["Category", "Name", "Username", "Password", "URL", "Notes", "Strength", "Breach Status", "Breach Count"]
_COL_MIN = [16, 24, 24, 28, 36, 30, 12, 16, 14]


@router.get("/export")
def export_vault(store: CredentialStore = Depends(get_store)):
    """
    Stream an .xlsx file with every record plus its strength label and breach
    status.  Nothing is written to disk.
    """
    records = sorted(store.list(), key=lambda r: r.name.lower())

    wb = Workbook()
    ws = wb.active
    ws.title = "Passwords"

    # -- Header row ----------------------------------------------------------
    ws.append(_EXPORT_HEADERS)
    for cell in ws[1]:
        cell.font  = _HEADER_FONT
        cell.fill  = _HEADER_FILL
        cell.alignment = _HEADER_ALIGN
        cell.border = _THIN_BORDER

    # -- Data rows -----------------------------------------------------------
    for record in records:
        ws.append([
            record.category,
            record.name,
            record.username,
            record.secret,
            record.url or "",
            record.notes or "",
            record.strength_label or "",
            record.breach_status,
            record.breach_count if record.breach_count is not None else "",
        ])
        row_idx = ws.max_row
        for col_idx in range(1, len(_EXPORT_HEADERS) + 1):
            ws.cell(row=row_idx, column=col_idx).border = _THIN_BORDER

    for col_idx, min_w in enumerate(_COL_MIN, start=1):
        ws.column_dimensions[chr(64 + col_idx)].width = min_w

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)

    store.record_export(len(records))

    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": 'attachment; filename="passwords.xlsx"'},
    )


# ---------------------------------------------------------------------------
# POST /vault/import  – bulk-create entries from an Excel workbook
# ---------------------------------------------------------------------------


@router.post("/import", response_model=ImportResponse)
async def import_vault(
    file: UploadFile = File(...),
    store: CredentialStore = Depends(get_store),
):
    """
    Accept an .xlsx file (same column layout as the export; annotation
    columns are ignored and recomputed).

    * Rows missing Name, Username or Password are skipped.
    * Rows with an unknown Category are skipped; an empty one means "other".
    """
    if not file.filename or not file.filename.lower().endswith(".xlsx"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only .xlsx files are accepted",
        )

    raw = await file.read()
    try:
        wb = load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not parse the uploaded file as .xlsx",
        )

    ws = wb.active
    header_row = next(ws.iter_rows(min_row=1, max_row=1, values_only=True), None) if ws else None
    if header_row is None:
        wb.close()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Sheet is empty")

    # -- Locate header columns (case-insensitive, tolerant of extra cols) ----
    col_map: dict[str, int] = {}
    for idx, cell_val in enumerate(header_row):
        if cell_val and isinstance(cell_val, str):
            col_map[cell_val.strip().lower()] = idx

    for required in ("name", "username", "password"):
        if required not in col_map:
            wb.close()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Missing required column: {required}",
            )

    rows = []
    skipped = 0
    for row in ws.iter_rows(min_row=2, values_only=True):
        fields = {
            "category": _cell_str(row, col_map.get("category")) or "other",
            "name": _cell_str(row, col_map["name"]),
            "username": _cell_str(row, col_map["username"]),
            "secret": _cell_str(row, col_map["password"]),
            "url": _cell_str(row, col_map.get("url")) or None,
            "notes": _cell_str(row, col_map.get("notes")) or None,
        }
        if not (fields["name"] and fields["username"] and fields["secret"]):
            skipped += 1
            continue
        if fields["category"] not in VALID_CATEGORIES:
            skipped += 1
            continue
        rows.append(fields)
    wb.close()

    imported = await store.create_many(rows) if rows else []
    logger.info("Vault import | imported=%d skipped=%d", len(imported), skipped)
    return ImportResponse(imported=len(imported), skipped_invalid=skipped)


def _cell_str(row: tuple, col_idx: int | None) -> str:
    """Safely extract a string value from a row tuple by column index."""
    if col_idx is None or col_idx >= len(row):
        return ""
    val = row[col_idx]
    return str(val).strip() if val is not None else ""
