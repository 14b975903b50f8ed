"""
Ristorante API: Gallery Image Route Handlers
=============================================

What:  Admin multipart upload into the image store and public serving of
       stored images.
How:   The multipart form is parsed by hand (not through UploadFile
       parameters) so a non-multipart request or a missing `file` field gets
       the usual `{"error": ...}` body instead of a framework 422.

`/img/{key:path}` takes the whole rest of the path as the key, including
slashes. main.py registers `admin_router` (the upload) ahead of it.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from ristorante.auth import require_admin
from ristorante.exceptions import NotFoundError, ValidationError
from ristorante.http import CORS_HEADERS, json_response
from ristorante.schemas.common import ErrorResponse, UploadResponse
from ristorante.services.image_service import image_service
from ristorante.services.image_store import ImageStore, get_image_store

logger = logging.getLogger(__name__)

IMAGE_CACHE_CONTROL = "public, max-age=86400"

router = APIRouter(tags=["Images"])

admin_router = APIRouter(
    prefix="/api/admin",
    tags=["Images (admin)"],
    dependencies=[Depends(get_image_store), Depends(require_admin)],
    responses={401: {"description": "Missing or wrong bearer token", "model": ErrorResponse}},
)


@admin_router.post(
    "/gallery/upload",
    status_code=201,
    response_model=UploadResponse,
    responses={400: {"description": "Bad multipart body or file type", "model": ErrorResponse}},
    summary="Upload a gallery image",
    description="multipart/form-data with one `file` field (jpg, jpeg, png or webp).",
)
async def upload_image(request: Request, store: ImageStore = Depends(get_image_store)):
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise ValidationError(message="expected multipart/form-data", field="body")

    try:
        form = await request.form(max_files=1)
    except (MultiPartException, StarletteHTTPException) as e:
        # Starlette reports unparsable parts as HTTPException(400) inside an app
        raise ValidationError(
            message="expected multipart/form-data",
            field="body",
            context={"error": str(e)},
        ) from e

    try:
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise ValidationError(message="file field required", field="file")
        content = await upload.read()
        key = await image_service.upload(
            store,
            filename=upload.filename,
            content=content,
            max_size=request.app.state.settings.max_upload_size,
        )
    finally:
        await form.close()

    url = f"{request.url.scheme}://{request.url.netloc}/img/{key}"
    return json_response(UploadResponse(key=key, url=url), status_code=201)


@router.get(
    "/img/{key:path}",
    responses={
        200: {"description": "Image bytes", "content": {"image/*": {}}},
        404: {"description": "No such image", "model": ErrorResponse},
        500: {"description": "IMAGES binding missing", "model": ErrorResponse},
    },
    summary="Serve a stored image",
)
async def serve_image(key: str, request: Request):
    if not key:
        raise NotFoundError(resource="image", resource_id=key)

    store = get_image_store(request)
    image = await image_service.fetch(store, key)
    if image is None:
        raise NotFoundError(resource="image", resource_id=key)

    headers = dict(CORS_HEADERS)
    headers["etag"] = image.etag
    headers["cache-control"] = IMAGE_CACHE_CONTROL
    return Response(content=image.content, media_type=image.content_type, headers=headers)
