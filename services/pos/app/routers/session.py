from __future__ import annotations

from uuid import uuid4

from fastapi import APIRouter, HTTPException, Query
from packages.shared.schemas.card_v1 import CardV1
from services.pos.app.engine.errors import (
    BackendUnavailableError,
    CapacityError,
    GeocodeError,
    PosError,
    SessionBusyError,
    SubmissionError,
    ValidationError,
)
from services.pos.app.models.session import (
    AddItemRequest,
    CatalogItemOut,
    CatalogOut,
    DraftUpdateRequest,
    QuantityRequest,
)
from services.pos.app.services.backend_factory import get_backend
from services.pos.app.services.cards import session_card
from services.pos.app.services.geocoder_factory import get_geocoder
from services.pos.app.services.session import PosSession
from services.pos.app.services.store import store

router = APIRouter(prefix="/v1/pos")


def _raise_pos_http_error(e: Exception) -> None:
    if isinstance(e, ValidationError):
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "reasons": [r.value for r in e.reasons]},
        ) from e

    if isinstance(e, CapacityError):
        raise HTTPException(
            status_code=409,
            detail={
                "message": str(e),
                "menu_item_id": e.menu_item_id,
                "available": e.available,
                "requested": e.requested,
            },
        ) from e

    if isinstance(e, SessionBusyError):
        raise HTTPException(status_code=409, detail=str(e)) from e

    if isinstance(e, GeocodeError):
        raise HTTPException(
            status_code=502,
            detail={"message": str(e), "address": e.address, "retryable": True},
        ) from e

    if isinstance(e, SubmissionError):
        status = 409 if e.is_seating_conflict else 502
        raise HTTPException(status_code=status, detail=str(e)) from e

    if isinstance(e, BackendUnavailableError):
        raise HTTPException(status_code=503, detail=str(e)) from e

    if isinstance(e, PosError):
        raise HTTPException(status_code=400, detail=str(e)) from e

    raise HTTPException(status_code=500, detail="Internal Server Error") from e


def _get_session(session_id: str) -> PosSession:
    session = store.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/sessions", response_model=CardV1)
async def create_session() -> CardV1:
    try:
        backend = get_backend()
        geocoder = get_geocoder()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    session = PosSession(uuid4().hex, backend=backend, geocoder=geocoder)
    try:
        await session.refresh_catalog()
    except PosError as e:
        _raise_pos_http_error(e)

    store.save_session(session)
    return session_card(session)


@router.get("/sessions/{session_id}", response_model=CardV1)
async def get_session(session_id: str) -> CardV1:
    return session_card(_get_session(session_id))


@router.delete("/sessions/{session_id}")
async def close_session(session_id: str) -> dict:
    _get_session(session_id)
    store.drop_session(session_id)
    return {"ok": True}


@router.get("/sessions/{session_id}/catalog", response_model=CatalogOut)
async def get_catalog(
    session_id: str,
    category: str | None = Query(None),
    q: str | None = Query(None),
) -> CatalogOut:
    snapshot = _get_session(session_id).catalog
    return CatalogOut(
        categories=snapshot.categories(),
        items=[
            CatalogItemOut(
                id=item.id,
                name=item.name,
                category=item.category,
                price=str(item.price),
                available_servings=item.available_servings,
                low_stock=item.is_low_stock,
                out_of_stock=item.is_out_of_stock,
            )
            for item in snapshot.filter(category=category, search=q)
        ],
        fetched_at=snapshot.fetched_at.isoformat(),
    )


@router.post("/sessions/{session_id}/catalog/refresh", response_model=CardV1)
async def refresh_catalog(session_id: str) -> CardV1:
    session = _get_session(session_id)
    try:
        await session.refresh_catalog()
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)


@router.post("/sessions/{session_id}/items", response_model=CardV1)
async def add_item(session_id: str, payload: AddItemRequest) -> CardV1:
    session = _get_session(session_id)
    try:
        session.add_item(payload.menu_item_id)
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)


@router.patch("/sessions/{session_id}/items/{index}", response_model=CardV1)
async def set_item_quantity(session_id: str, index: int, payload: QuantityRequest) -> CardV1:
    session = _get_session(session_id)
    try:
        session.set_quantity(index, payload.quantity)
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)


@router.delete("/sessions/{session_id}/items/{index}", response_model=CardV1)
async def remove_item(session_id: str, index: int) -> CardV1:
    session = _get_session(session_id)
    try:
        session.remove_item(index)
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)


@router.patch("/sessions/{session_id}/draft", response_model=CardV1)
async def update_draft(session_id: str, payload: DraftUpdateRequest) -> CardV1:
    session = _get_session(session_id)
    try:
        session.update_details(**payload.model_dump(exclude_unset=True))
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)


@router.post("/sessions/{session_id}/delivery/quote", response_model=CardV1)
async def quote_delivery(session_id: str) -> CardV1:
    session = _get_session(session_id)
    try:
        await session.request_quote()
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)


@router.get("/sessions/{session_id}/tables/{table_number}/status", response_model=CardV1)
async def table_status(session_id: str, table_number: str) -> CardV1:
    session = _get_session(session_id)
    try:
        await session.check_table(table_number)
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)


@router.post("/sessions/{session_id}/pay", response_model=CardV1)
async def pay(session_id: str) -> CardV1:
    session = _get_session(session_id)
    try:
        session.pay()
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)


@router.post("/sessions/{session_id}/confirm", response_model=CardV1)
async def confirm(session_id: str) -> CardV1:
    session = _get_session(session_id)
    try:
        await session.confirm()
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)


@router.post("/sessions/{session_id}/cancel", response_model=CardV1)
async def cancel_confirmation(session_id: str) -> CardV1:
    session = _get_session(session_id)
    try:
        session.cancel_confirmation()
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)


@router.post("/sessions/{session_id}/reset", response_model=CardV1)
async def reset(session_id: str) -> CardV1:
    session = _get_session(session_id)
    try:
        session.reset()
    except PosError as e:
        _raise_pos_http_error(e)
    return session_card(session)
