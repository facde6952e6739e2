"""Board administration routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from board_admin.routes.dependencies import get_pipeline_context
from board_admin.schemas.board import CreateBoardResponse, DeleteBoardResponse
from board_admin.schemas.error import ErrorResponse
from board_admin.services.create_board import CreateBoardPipeline
from board_admin.services.delete_board import DeleteBoardPipeline
from board_admin.services.pipeline import PipelineContext

router = APIRouter(tags=["Boards"])

create_board_pipeline = CreateBoardPipeline()
delete_board_pipeline = DeleteBoardPipeline()

_ALL_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
_ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse}
    for status_code in (401, 403, 404, 405, 409, 500)
}


def _other_methods(method: str) -> list[str]:
    return [candidate for candidate in _ALL_METHODS if candidate != method]


@router.post("/create-board", response_model=CreateBoardResponse, responses=_ERROR_RESPONSES)
async def create_board(
    request: Request,
    context: Annotated[PipelineContext, Depends(get_pipeline_context)],
) -> Response:
    return await create_board_pipeline.handle(request, context)


@router.api_route("/create-board", methods=_other_methods("POST"), include_in_schema=False)
async def create_board_other_methods(
    request: Request,
    context: Annotated[PipelineContext, Depends(get_pipeline_context)],
) -> Response:
    return await create_board_pipeline.handle(request, context)


@router.delete("/delete-board", response_model=DeleteBoardResponse, responses=_ERROR_RESPONSES)
async def delete_board(
    request: Request,
    context: Annotated[PipelineContext, Depends(get_pipeline_context)],
) -> Response:
    return await delete_board_pipeline.handle(request, context)


@router.api_route("/delete-board", methods=_other_methods("DELETE"), include_in_schema=False)
async def delete_board_other_methods(
    request: Request,
    context: Annotated[PipelineContext, Depends(get_pipeline_context)],
) -> Response:
    return await delete_board_pipeline.handle(request, context)
