from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlmodel import Session

from ..core.database import get_db
from ..core.deps import get_current_active_user, get_storage
from ..core.storage import LocalStorage
from ..models.enums import ItemType
from ..models.user import User
from ..schemas.comment import CommentCreate, CommentResponse
from ..schemas.item import HomeFeed, ItemDetails, ItemResponse
from ..services import comments as comment_service
from ..services import items as item_service

router = APIRouter()

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _media_type(item_type: ItemType, data: bytes) -> str:
    if item_type == ItemType.VIDEO:
        return "video/mp4"
    if data.startswith(PNG_SIGNATURE):
        return "image/png"
    return "image/jpeg"


@router.get("", response_model=HomeFeed)
async def home_feed(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Pictures and videos from every group the current user can see."""
    return item_service.get_home_feed(db, current_user)


@router.post("/upload", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def upload_item(
    file: UploadFile = File(...),
    group_id: int = Form(...),
    name: str = Form(..., max_length=30, pattern=r"^[a-zA-Z][a-zA-Z0-9_]+$"),
    description: str = Form(..., min_length=1, max_length=400),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_active_user),
):
    """Upload a picture or video into a group, subject to upload limits."""
    data = await file.read()
    return item_service.upload_item(
        db,
        storage,
        current_user,
        group_id=group_id,
        name=name,
        description=description,
        filename=file.filename or "",
        data=data,
    )


@router.get("/{item_id}", response_model=ItemDetails)
async def get_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return item_service.get_item_with_comments(db, current_user, item_id)


@router.get("/{item_id}/file")
async def get_item_file(
    item_id: int,
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_active_user),
):
    """Stream the stored bytes of an item."""
    item, data = item_service.read_item_bytes(db, storage, current_user, item_id)
    return Response(content=data, media_type=_media_type(item.item_type, data))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
    current_user: User = Depends(get_current_active_user),
):
    """Delete an item. Only its uploader or an admin may do this."""
    item_service.delete_item(db, storage, item_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{item_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    item_id: int,
    comment_data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return comment_service.add_comment(db, current_user, item_id, comment_data.text)
