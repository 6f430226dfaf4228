"""
Version tag API routes.

Endpoints for resolving unit tags and composing versioned asset URLs.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from assetstamp.api.dependencies import get_resolver
from assetstamp.api.schemas import TagResponse, UrlResponse
from assetstamp.exceptions import ResolutionError
from assetstamp.resolver import VersionTagResolver
from assetstamp.units import UnitReference
from assetstamp.urls import compose_versioned_url

router = APIRouter()


@router.get("/tags/{unit:path}", response_model=TagResponse)
async def get_tag(
    unit: str,
    resolver: VersionTagResolver = Depends(get_resolver),
) -> TagResponse:
    """
    Resolve the version tag of a compiled unit.

    The unit accepts the same forms as the library: ``mylib``,
    ``module:mylib``, ``dist:requests`` or ``dir:static/build``.

    Raises:
        HTTPException 404: Unit cannot be resolved
    """
    try:
        reference = UnitReference.parse(unit)
        tag = await resolver.resolve_async(reference)
    except ResolutionError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return TagResponse(unit=unit, key=reference.key, tag=tag.value, provider=tag.provider)


@router.get("/urls", response_model=UrlResponse)
async def get_versioned_url(
    path: str = Query(..., min_length=1, description="Asset path to version"),
    unit: str = Query(..., min_length=1, description="Unit the asset ships with"),
    param: str | None = Query(None, description="Query parameter name"),
    resolver: VersionTagResolver = Depends(get_resolver),
) -> UrlResponse:
    """
    Compose the versioned URL for an asset.

    Raises:
        HTTPException 404: Unit cannot be resolved
    """
    try:
        tag = await resolver.resolve_async(unit)
    except ResolutionError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return UrlResponse(url=compose_versioned_url(path, tag, param), tag=tag.value)
