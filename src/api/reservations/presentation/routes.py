"""HTTP routes for the reservations bounded context."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_read_session
from reservations.application.services import ReservationService
from reservations.dependencies import (
    get_caller_id,
    get_equipment_catalog,
    get_reservation_service,
    get_stream_caller_id,
)
from reservations.ports.repositories import IEquipmentCatalog
from reservations.presentation.models import (
    EquipmentResponse,
    ReservationListResponse,
    ReservationResponse,
    SubmitReservationRequest,
    TransitionRequest,
)
from shared_kernel.change_feed import ChangeStream

KEEPALIVE_SECONDS = 15.0

equipment_router = APIRouter(prefix="/equipment", tags=["equipment"])

router = APIRouter(prefix="/reservations", tags=["reservations"])


@equipment_router.get(
    "",
    response_model=list[EquipmentResponse],
    summary="List reservable equipment",
)
async def list_equipment(
    catalog: Annotated[IEquipmentCatalog, Depends(get_equipment_catalog)],
) -> list[EquipmentResponse]:
    """Public equipment catalog."""
    return [EquipmentResponse.from_domain(item) for item in catalog.list_all()]


@router.post(
    "",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a reservation",
    description="""
Submit a reservation request as the authenticated student. The request
starts as pending until staff review it.

The reservation date must be today or later in the campus timezone. The
time slot is required (at most 50 characters); notes are optional (at most
500 characters).
""",
    responses={
        201: {"description": "Reservation submitted"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not a student"},
        422: {"description": "Invalid field or unknown equipment"},
    },
)
async def submit_reservation(
    request: SubmitReservationRequest,
    caller_id: Annotated[str, Depends(get_caller_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ReservationResponse:
    """Submit a new reservation."""
    reservation = await service.submit(
        caller_id=caller_id,
        equipment_ref=request.equipment,
        reservation_date=request.reservation_date,
        time_slot=request.time_slot,
        notes=request.notes,
    )
    return ReservationResponse.from_domain(reservation)


@router.get(
    "/mine",
    response_model=ReservationListResponse,
    summary="List my reservations",
)
async def list_my_reservations(
    caller_id: Annotated[str, Depends(get_caller_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ReservationListResponse:
    """The caller's own reservations, newest first."""
    reservations = await service.list_for_student(caller_id)
    items = [ReservationResponse.from_domain(r) for r in reservations]
    return ReservationListResponse(reservations=items, count=len(items))


@router.get(
    "",
    response_model=ReservationListResponse,
    summary="List all reservations",
    description="All reservations with student profiles, newest first. "
    "Requires the staff or admin role.",
    responses={
        200: {"description": "Reservations listed"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not staff or admin"},
    },
)
async def list_all_reservations(
    caller_id: Annotated[str, Depends(get_caller_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ReservationListResponse:
    """Staff view of every reservation."""
    views = await service.list_all(caller_id)
    items = [ReservationResponse.from_view(view) for view in views]
    return ReservationListResponse(reservations=items, count=len(items))


async def _stream_changes(subscription: ChangeStream) -> AsyncIterator[str]:
    try:
        yield ": connected\n\n"
        while True:
            try:
                change = await asyncio.wait_for(
                    anext(subscription), timeout=KEEPALIVE_SECONDS
                )
            except TimeoutError:
                yield ": keepalive\n\n"
                continue
            except StopAsyncIteration:
                break
            payload = json.dumps(change.to_payload())
            yield f"event: reservation_change\ndata: {payload}\n\n"
    finally:
        await subscription.aclose()


@router.get(
    "/changes",
    summary="Stream reservation changes",
    description="""
Server-Sent Events stream of committed reservation changes. Students
receive changes to their own reservations; staff and admins receive all.

Each event carries `{reservationId, studentId, newStatus, occurredAt}`.
Browsers may pass the session token as the `access_token` query parameter.
""",
    response_class=StreamingResponse,
    responses={
        200: {"description": "Event stream", "content": {"text/event-stream": {}}},
        401: {"description": "Authentication required"},
    },
)
async def stream_changes(
    caller_id: Annotated[str, Depends(get_stream_caller_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
    read_session: Annotated[AsyncSession, Depends(get_read_session)],
) -> StreamingResponse:
    """Open a change stream scoped to the caller."""
    subscription = await service.subscribe_changes(caller_id)
    # Release the role lookup connection; the stream may stay open for hours
    await read_session.close()
    return StreamingResponse(
        _stream_changes(subscription),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get(
    "/{reservation_id}",
    response_model=ReservationResponse,
    summary="Get a reservation",
    description="Students may only read their own reservations; anything "
    "else is reported as not found.",
    responses={
        200: {"description": "Reservation found"},
        401: {"description": "Authentication required"},
        404: {"description": "Reservation not found or not visible"},
    },
)
async def get_reservation(
    reservation_id: str,
    caller_id: Annotated[str, Depends(get_caller_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ReservationResponse:
    """Get one reservation."""
    reservation = await service.get(caller_id, reservation_id)
    return ReservationResponse.from_domain(reservation)


@router.post(
    "/{reservation_id}/transitions",
    response_model=ReservationResponse,
    summary="Change a reservation's status",
    description="""
Move a reservation along its lifecycle. Requires the staff or admin role.

| From | Allowed to |
|---|---|
| pending | approved, rejected |
| approved | completed |

Non-blank notes replace the stored notes. A 409 `concurrent_modification`
means another reviewer acted first: re-read and retry if still applicable.
""",
    responses={
        200: {"description": "Status changed"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not staff or admin"},
        404: {"description": "Reservation not found"},
        409: {"description": "Invalid transition or concurrent modification"},
        422: {"description": "Notes too long"},
    },
)
async def transition_reservation(
    reservation_id: str,
    request: TransitionRequest,
    caller_id: Annotated[str, Depends(get_caller_id)],
    service: Annotated[ReservationService, Depends(get_reservation_service)],
) -> ReservationResponse:
    """Apply a status transition."""
    reservation = await service.transition(
        caller_id=caller_id,
        reservation_id=reservation_id,
        target_status=request.status,
        notes=request.notes,
    )
    return ReservationResponse.from_domain(reservation)
