"""RSVP routes. Every write goes through rsvp_service so the attendee list stays in sync."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user
from eventhub.database import get_db
from eventhub.models.attendee import RSVPStatus
from eventhub.models.user import User
from eventhub.pagination import PageParams, RosterPageParams, paginate
from eventhub.schemas.common import MessageResponse
from eventhub.schemas.rsvp import (
    EventRSVPListResponse, RSVPListResponse, RSVPRequest, RSVPResponse, RSVPStatsResponse,
)
from eventhub.services import rsvp_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/my", response_model=RSVPListResponse)
def my_rsvps(
    rsvp_status: Optional[RSVPStatus] = Query(None, alias="status"),
    params: PageParams = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rsvps, pagination = paginate(rsvp_service.user_rsvps_query(db, user, rsvp_status), params)
    return RSVPListResponse(rsvps=rsvps, pagination=pagination)


@router.post("/events/{event_id}", response_model=RSVPResponse, status_code=status.HTTP_201_CREATED)
def rsvp_to_event(
    event_id: str,
    payload: RSVPRequest,
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create the caller's RSVP (201) or update the existing one in place (200)."""
    rsvp, created = rsvp_service.upsert_rsvp(
        db,
        event_id,
        user,
        status=payload.status,
        notes=payload.notes,
        guests=payload.guests,
        special_requests=payload.special_requests,
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    message = "RSVP created successfully" if created else "RSVP updated successfully"
    return RSVPResponse(message=message, rsvp=rsvp)


@router.get("/events/{event_id}", response_model=RSVPResponse)
def get_my_rsvp(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return RSVPResponse(rsvp=rsvp_service.get_user_rsvp(db, event_id, user))


@router.delete("/events/{event_id}", response_model=MessageResponse)
def cancel_rsvp(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    rsvp_service.delete_rsvp(db, event_id, user)
    return MessageResponse(message="RSVP deleted successfully")


@router.get("/events/{event_id}/all", response_model=EventRSVPListResponse)
def event_rsvps(
    event_id: str,
    rsvp_status: Optional[RSVPStatus] = Query(None, alias="status"),
    params: RosterPageParams = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Organizer view of every RSVP with per-status counts."""
    rsvp_service.get_event_for_organizer(db, event_id, user)
    rsvps, pagination = paginate(rsvp_service.event_rsvps_query(db, event_id, rsvp_status), params)
    return EventRSVPListResponse(
        rsvps=rsvps,
        counts=rsvp_service.status_counts(db, event_id),
        pagination=pagination,
    )


@router.get("/events/{event_id}/stats", response_model=RSVPStatsResponse)
def event_rsvp_stats(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    rsvp_service.get_event_for_organizer(db, event_id, user)
    return RSVPStatsResponse(stats=rsvp_service.event_stats(db, event_id))


@router.post("/events/{event_id}/check-in/{user_id}", response_model=RSVPResponse)
def check_in(
    event_id: str,
    user_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rsvp = rsvp_service.check_in(db, event_id, user, user_id)
    return RSVPResponse(message="Attendee checked in successfully", rsvp=rsvp)
