"""
FastAPI routes for the CMS content types.

One router per type under /api/cms/<path>, all built by build_content_router:

    GET    ?id=&<filters>&published=   single item (with id) or list
    POST   {...fields}                 create, 201
    PUT    {id, ...partial}            shallow update
    DELETE ?id=                        delete

Blog posts use "slug" in place of "id". Only reads filtered to
published=true are anonymous; everything else needs a session.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import APIRouter, Body, Depends, Request, status

from cms.auth import gate
from cms.context import CMSContext
from cms.models.content import (
    BLOG_POST,
    CAREER,
    DOCUMENTATION,
    HELP_ARTICLE,
    VIDEO,
    ContentRecord,
    ContentType,
)
from cms.models.user import User
from cms.utils.exceptions import NotFoundError, ValidationError
from .deps import get_cms, get_current_user, get_session_token

Sorter = Callable[[List[ContentRecord]], List[ContentRecord]]


def newest_first(items: List[ContentRecord]) -> List[ContentRecord]:
    return sorted(items, key=lambda item: item.updated_at, reverse=True)


def by_order_then_newest(items: List[ContentRecord]) -> List[ContentRecord]:
    # Stable sort: secondary key first
    return sorted(newest_first(items), key=lambda item: item.order)


def by_date_desc(items: List[ContentRecord]) -> List[ContentRecord]:
    return sorted(items, key=lambda item: item.date or "", reverse=True)


@dataclass(frozen=True)
class ContentRoute:
    path: str
    content_type: ContentType
    filters: Tuple[str, ...] = ()
    contains: Dict[str, str] = field(default_factory=dict)  # query param -> array field
    sort: Optional[Sorter] = None


CONTENT_ROUTES = (
    ContentRoute("/help", HELP_ARTICLE, filters=("category",), sort=newest_first),
    ContentRoute("/documentation", DOCUMENTATION, filters=("section",), sort=by_order_then_newest),
    ContentRoute("/videos", VIDEO, filters=("category",), sort=newest_first),
    ContentRoute("/careers", CAREER, filters=("department", "location", "type")),
    ContentRoute("/blog", BLOG_POST, contains={"tag": "tags"}, sort=by_date_desc),
)


def parse_published(value: Optional[str]) -> Optional[bool]:
    """?published=true|false; absent means no filter"""
    if value is None:
        return None
    return value.strip().lower() == "true"


def build_content_router(route: ContentRoute) -> APIRouter:
    content_type = route.content_type
    id_param = content_type.id_field
    label = content_type.label

    router = APIRouter(prefix=f"/api/cms{route.path}", tags=[content_type.doc_type])

    @router.get("")
    def read_items(
        request: Request,
        token: Optional[str] = Depends(get_session_token),
        cms: CMSContext = Depends(get_cms),
    ) -> Any:
        params = request.query_params
        published = parse_published(params.get("published"))
        if gate.read_requires_session(published):
            gate.require_session(cms.sessions, token)

        filters: Dict[str, Any] = {name: params.get(name) for name in route.filters}
        filters["published"] = published
        item_id = params.get(id_param)
        if item_id:
            filters["id"] = item_id
        contains = {fld: params.get(name) for name, fld in route.contains.items()}

        items = cms.content.list(content_type, filters, contains)
        if item_id:
            if not items:
                raise NotFoundError(f"{label} not found")
            return items[0].to_api()

        if route.sort:
            items = route.sort(items)
        return [item.to_api() for item in items]

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_item(
        payload: Dict[str, Any] = Body(...),
        _: User = Depends(get_current_user),
        cms: CMSContext = Depends(get_cms),
    ) -> Dict[str, Any]:
        return cms.content.create(content_type, payload).to_api()

    @router.put("")
    def update_item(
        payload: Dict[str, Any] = Body(...),
        _: User = Depends(get_current_user),
        cms: CMSContext = Depends(get_cms),
    ) -> Dict[str, Any]:
        item_id = payload.get(id_param)
        if not item_id or not isinstance(item_id, str):
            raise ValidationError(f"{label} {id_param} is required", fields=[id_param])

        existing = cms.content.get(content_type, item_id)
        if not existing:
            raise NotFoundError(f"{label} not found")
        return cms.content.update(content_type, existing, payload).to_api()

    @router.delete("")
    def delete_item(
        request: Request,
        _: User = Depends(get_current_user),
        cms: CMSContext = Depends(get_cms),
    ) -> Dict[str, bool]:
        item_id = request.query_params.get(id_param)
        if not item_id:
            raise ValidationError(f"{label} {id_param} is required", fields=[id_param])
        if not cms.content.delete(content_type, item_id):
            raise NotFoundError(f"{label} not found")
        return {"success": True}

    return router


def build_content_routers() -> List[APIRouter]:
    return [build_content_router(route) for route in CONTENT_ROUTES]
