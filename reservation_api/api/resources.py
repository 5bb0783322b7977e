"""Resource catalog endpoints.

GET    /api/resources              → active resources, filterable
GET    /api/resources/categories   → distinct categories
GET    /api/resources/locations    → distinct locations
GET    /api/resources/{id}         → one resource
POST   /api/resources              → create (admin)
PUT    /api/resources/{id}         → update (admin)
DELETE /api/resources/{id}         → delete, or deactivate if booked ahead (admin)
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Response

from reservation_api.auth.context import CurrentUser
from reservation_api.auth.dependencies import require_admin
from reservation_api.domain.schemas import (
    ResourceFilter,
    ResourceUpdate,
    ResourceView,
    ResourceWrite,
)
from reservation_api.wiring import catalog

router = APIRouter(prefix="/api/resources", tags=["resources"])


@router.get("", response_model=list[ResourceView])
def list_resources(
    category: str | None = None,
    search_term: str | None = None,
    min_capacity: int | None = None,
    max_capacity: int | None = None,
    max_hourly_rate: Decimal | None = None,
    max_daily_rate: Decimal | None = None,
    location: str | None = None,
    is_available_now: bool | None = None,
    available_from: datetime | None = None,
    available_to: datetime | None = None,
) -> list[ResourceView]:
    filters = ResourceFilter(
        category=category,
        search_term=search_term,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        max_hourly_rate=max_hourly_rate,
        max_daily_rate=max_daily_rate,
        location=location,
        is_available_now=is_available_now,
        available_from=available_from,
        available_to=available_to,
    )
    return [catalog.to_view(r) for r in catalog.search(filters)]


@router.get("/categories", response_model=list[str])
def list_categories() -> list[str]:
    return catalog.categories()


@router.get("/locations", response_model=list[str])
def list_locations() -> list[str]:
    return catalog.locations()


@router.get("/{resource_id}", response_model=ResourceView)
def get_resource(resource_id: str) -> ResourceView:
    return catalog.to_view(catalog.get(resource_id))


@router.post("", response_model=ResourceView, status_code=201)
def create_resource(
    payload: ResourceWrite, _admin: CurrentUser = Depends(require_admin)
) -> ResourceView:
    return catalog.to_view(catalog.create(payload))


@router.put("/{resource_id}", status_code=204)
def update_resource(
    resource_id: str, payload: ResourceUpdate, _admin: CurrentUser = Depends(require_admin)
) -> Response:
    catalog.update(resource_id, payload)
    return Response(status_code=204)


@router.delete("/{resource_id}", status_code=204)
def delete_resource(resource_id: str, _admin: CurrentUser = Depends(require_admin)) -> Response:
    catalog.delete(resource_id)
    return Response(status_code=204)
