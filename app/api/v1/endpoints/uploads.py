"""Serve files stored under UPLOAD_DIR."""

from fastapi import APIRouter
from fastapi.responses import FileResponse

from app.utils.file_handler import CACHE_CONTROL, get_stored_file

router = APIRouter(
    prefix="/uploads",
    tags=["Uploads"],
)


@router.get(
    "/{file_path:path}",
    summary="Fetch an uploaded file",
    response_class=FileResponse,
)
def get_upload(file_path: str) -> FileResponse:
    path, content_type = get_stored_file(file_path)
    return FileResponse(path, media_type=content_type, headers={"Cache-Control": CACHE_CONTROL})
