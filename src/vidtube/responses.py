from typing import Any

from pydantic import BaseModel


class ApiResponse(BaseModel):
    statusCode: int
    data: Any = None
    message: str = "Success"
    success: bool = True


def api_response(data: Any, message: str = "Success", status_code: int = 200) -> dict:
    return ApiResponse(
        statusCode=status_code,
        data=data,
        message=message,
        success=status_code < 400,
    ).model_dump()
