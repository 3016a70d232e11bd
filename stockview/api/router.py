from __future__ import annotations

import io
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, UploadFile, status
from pydantic import BaseModel, ConfigDict, Field

from stockview.models.record import Record, SOURCE_FIELDS
from stockview.services.errors import (
    EmptyResultError,
    FontResolutionError,
    FormatError,
    InventoryError,
    IoError,
    NotFoundError,
    StorageError,
)
from stockview.services.session import InventorySession, QueryResult
from stockview.utils.logging import get_logger

LOGGER = get_logger(__name__)

ERROR_STATUS: dict[type[InventoryError], int] = {
    IoError: status.HTTP_400_BAD_REQUEST,
    FormatError: 422,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    EmptyResultError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    FontResolutionError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ProductPayload(BaseModel):
    id: int
    code: str
    name: str
    brand: str
    category: str
    price: int
    price_code: Annotated[str, Field(alias="priceCode")]
    date: str
    quantity: int

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_record(cls, record: Record) -> ProductPayload:
        return cls(**record.as_dict())


class ProductListResponse(BaseModel):
    items: list[ProductPayload]
    count: int


class SortStatePayload(BaseModel):
    column: str = "id"
    direction: str = "asc"


class SetViewRequest(BaseModel):
    sort_state: Annotated[SortStatePayload, Field(alias="sortState", default_factory=SortStatePayload)]
    filters: Annotated[dict[str, str | None], Field(default_factory=dict)]

    model_config = ConfigDict(populate_by_name=True)


class ImportPathRequest(BaseModel):
    path: str


class ExportResponse(BaseModel):
    message: str


class CountResponse(BaseModel):
    count: int


class ViewStateResponse(BaseModel):
    sort_state: Annotated[SortStatePayload, Field(alias="sortState")]
    filters: dict[str, str]

    model_config = ConfigDict(populate_by_name=True)


def _status_for(error: InventoryError) -> int:
    for error_type in type(error).__mro__:
        if error_type in ERROR_STATUS:
            return ERROR_STATUS[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _http_error(error: InventoryError) -> HTTPException:
    LOGGER.warning("Inventory operation failed: %s (%s)", error.kind, error.detail)
    return HTTPException(
        status_code=_status_for(error),
        detail={"kind": error.kind, "message": error.user_message, "reason": error.detail},
    )


def _to_response(result: QueryResult) -> ProductListResponse:
    return ProductListResponse(
        items=[ProductPayload.from_record(record) for record in result.items],
        count=result.count,
    )


def create_app(*, session: InventorySession | None = None) -> FastAPI:
    """Create a FastAPI instance exposing the inventory session operations."""
    app = FastAPI(title="Stockview Inventory API", version="0.1.0")
    inventory = session or InventorySession()
    app.state.inventory = inventory

    @app.post("/inventory/import", response_model=ProductListResponse)
    def import_upload_endpoint(upload: Annotated[UploadFile, File()]) -> ProductListResponse:
        try:
            text = upload.file.read().decode(inventory.import_config.encoding)
        except UnicodeDecodeError as error:
            raise _http_error(IoError(f"Could not decode {upload.filename}: {error}")) from error
        try:
            result = inventory.import_file(io.StringIO(text, newline=""))
        except InventoryError as error:
            raise _http_error(error) from error
        return _to_response(result)

    @app.post("/inventory/import/path", response_model=ProductListResponse)
    def import_path_endpoint(payload: ImportPathRequest) -> ProductListResponse:
        try:
            result = inventory.import_file(payload.path)
        except InventoryError as error:
            raise _http_error(error) from error
        return _to_response(result)

    @app.post("/inventory/restore", response_model=ProductListResponse)
    def restore_endpoint() -> ProductListResponse:
        try:
            result = inventory.restore()
        except InventoryError as error:
            raise _http_error(error) from error
        return _to_response(result)

    @app.post("/inventory/export", response_model=ExportResponse)
    def export_endpoint() -> ExportResponse:
        try:
            message = inventory.persist()
        except InventoryError as error:
            raise _http_error(error) from error
        return ExportResponse(message=message)

    @app.put("/inventory/view", response_model=ProductListResponse)
    def set_view_endpoint(payload: SetViewRequest) -> ProductListResponse:
        result = inventory.set_view(
            payload.sort_state.column,
            payload.sort_state.direction,
            payload.filters,
        )
        return _to_response(result)

    @app.get("/inventory/view", response_model=ViewStateResponse)
    def get_view_endpoint() -> ViewStateResponse:
        view = inventory.view_state()
        return ViewStateResponse(
            sort_state=SortStatePayload(
                column=view.sort.key.column,
                direction=view.sort.direction.value,
            ),
            filters={name.alias: view.filters.get(name, "") for name in SOURCE_FIELDS},
        )

    @app.get("/inventory/widths", response_model=ProductPayload)
    def width_hints_endpoint() -> ProductPayload:
        return ProductPayload.from_record(inventory.width_hints())

    @app.get("/inventory/count", response_model=CountResponse)
    def count_endpoint() -> CountResponse:
        return CountResponse(count=inventory.count())

    return app
