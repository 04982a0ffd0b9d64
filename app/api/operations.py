from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.core.logger import logger
from app.models.contract import (
    CONTRACT_VERSION,
    CONTRACT_VERSION_HEADER,
    ContractError,
    ContractResponse,
    Operation,
    parse_request,
    serialize_result,
    validation_detail,
)
from app.services.booking_service import BookingResolvers

router = APIRouter()


def get_resolvers(request: Request) -> BookingResolvers:
    return request.app.state.resolvers


def contract_response(status_code: int, body: ContractResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers={CONTRACT_VERSION_HEADER: CONTRACT_VERSION},
    )


def error_response(status_code: int, message: str, error_type: str,
                   operation: Optional[str] = None, detail: Any = None) -> JSONResponse:
    error = ContractError(message=message, type=error_type, operation=operation, detail=detail)
    return contract_response(status_code, ContractResponse(errors=[error]))


@router.post("/operations")
async def execute_operation(
    request: Request,
    resolvers: BookingResolvers = Depends(get_resolvers),
):
    """
    Single contract endpoint. The body names the operation and carries its
    variables; it is validated in full before any resolver runs.
    """
    client_version = request.headers.get(CONTRACT_VERSION_HEADER)
    if client_version and client_version != CONTRACT_VERSION:
        logger.warning(f"⚠️ Client speaks contract v{client_version}, server is v{CONTRACT_VERSION}")

    try:
        payload = await request.json()
    except ValueError as e:
        logger.warning(f"⚠️ Malformed request body: {e}")
        return error_response(400, "Request body is not valid JSON", "BAD_REQUEST", detail=str(e))

    try:
        contract_request = parse_request(payload)
    except ValidationError as e:
        operation_name = payload.get("operation") if isinstance(payload, dict) else None
        logger.warning(f"⚠️ Contract validation failed for {operation_name}: {e.error_count()} error(s)")
        return error_response(
            400,
            "Request does not match the contract",
            "VALIDATION_ERROR",
            operation=operation_name if isinstance(operation_name, str) else None,
            detail=validation_detail(e),
        )

    operation = Operation(contract_request.operation)
    try:
        result = await resolvers.resolve(contract_request)
    except Exception as e:
        # Surfaced to the caller unredacted
        logger.exception(f"🚨 Operation {operation.value} failed: {e}")
        return error_response(
            200,
            str(e),
            type(e).__name__,
            operation=operation.value,
            detail=repr(e),
        )

    data = {operation.value: serialize_result(operation, result)}
    return contract_response(200, ContractResponse(data=data))
