"""REST API routes for xit! documents."""

from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from xit.tools.xit_tools import (
    handle_file_new,
    handle_file_read,
    handle_format,
    handle_group_add,
    handle_group_delete,
    handle_group_rename,
    handle_item_add,
    handle_item_delete,
    handle_item_edit,
    handle_item_update,
    handle_parse,
    handle_preview,
)


# ---------------------------------------------------------------------------
# Request body models
# ---------------------------------------------------------------------------


class ContentBody(BaseModel):
    content: str
    today: Optional[str] = None


class PreviewBody(BaseModel):
    text: str
    today: Optional[str] = None


class ItemUpdateBody(BaseModel):
    status: Optional[str] = None
    cycle: bool = False


class ItemAddBody(BaseModel):
    description: str
    status: str = "open"
    priority: int = 0
    position: Optional[int] = None


class ItemEditBody(BaseModel):
    description: Optional[str] = None
    priority: Optional[int] = None
    continuation_lines: Optional[List[str]] = None


class GroupAddBody(BaseModel):
    title: Optional[str] = "New Group"
    description: str = "New task"


class GroupRenameBody(BaseModel):
    title: Optional[str] = None


def register_routes(app_router: APIRouter, root: Path) -> None:
    """Attach xit! REST routes serving files under ``root``."""

    @app_router.post("/parse")
    def parse(body: ContentBody):
        try:
            return handle_parse(content=body.content, today=body.today)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app_router.post("/format")
    def format_content(body: ContentBody):
        return handle_format(content=body.content)

    @app_router.post("/preview")
    def preview(body: PreviewBody):
        try:
            return handle_preview(text=body.text, today=body.today)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app_router.get("/files/{path:path}")
    def read_file(
        path: str,
        status: Optional[str] = Query(None),
        overdue_only: bool = Query(False),
        today: Optional[str] = Query(None),
    ):
        try:
            result = handle_file_read(root, path=path, status=status, overdue_only=overdue_only, today=today)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if "error" in result:
            raise HTTPException(status_code=404, detail=result["error"])
        return result

    @app_router.post("/files/{path:path}", status_code=201)
    def create_file(path: str):
        try:
            return handle_file_new(root, path=path)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app_router.patch("/items/{group}/{item}")
    def update_item(group: int, item: int, body: ItemUpdateBody, path: str = Query(...)):
        try:
            result = handle_item_update(root, path=path, group=group, item=item, **body.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if "error" in result:
            raise HTTPException(status_code=404, detail=result["error"])
        return result

    @app_router.put("/items/{group}/{item}")
    def edit_item(group: int, item: int, body: ItemEditBody, path: str = Query(...)):
        try:
            result = handle_item_edit(root, path=path, group=group, item=item, **body.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if "error" in result:
            raise HTTPException(status_code=404, detail=result["error"])
        return result

    @app_router.delete("/items/{group}/{item}")
    def delete_item(group: int, item: int, path: str = Query(...)):
        try:
            result = handle_item_delete(root, path=path, group=group, item=item)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if "error" in result:
            raise HTTPException(status_code=404, detail=result["error"])
        return result

    @app_router.post("/items/{group}", status_code=201)
    def add_item(group: int, body: ItemAddBody, path: str = Query(...)):
        try:
            result = handle_item_add(root, path=path, group=group, **body.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if "error" in result:
            raise HTTPException(status_code=404, detail=result["error"])
        return result

    @app_router.post("/groups", status_code=201)
    def add_group(body: GroupAddBody, path: str = Query(...)):
        try:
            result = handle_group_add(root, path=path, **body.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if "error" in result:
            raise HTTPException(status_code=404, detail=result["error"])
        return result

    @app_router.patch("/groups/{group}")
    def rename_group(group: int, body: GroupRenameBody, path: str = Query(...)):
        try:
            result = handle_group_rename(root, path=path, group=group, title=body.title)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if "error" in result:
            raise HTTPException(status_code=404, detail=result["error"])
        return result

    @app_router.delete("/groups/{group}")
    def delete_group(group: int, path: str = Query(...)):
        try:
            result = handle_group_delete(root, path=path, group=group)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if "error" in result:
            raise HTTPException(status_code=404, detail=result["error"])
        return result
