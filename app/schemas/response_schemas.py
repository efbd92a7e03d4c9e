# app/schemas/response_schemas.py
from pydantic import BaseModel
from typing import List

NOT_FOUND_MESSAGE = "Your query could not be completed"


class ErrorMessage(BaseModel):
    message: str
    errors: List[str] = []


def not_found_detail(model_name: str, record_id) -> dict:
    return ErrorMessage(
        message=NOT_FOUND_MESSAGE,
        errors=[f"Couldn't find {model_name} with 'id'={record_id}"],
    ).model_dump()


def rejected_detail(error: Exception) -> dict:
    return ErrorMessage(message="Validation failed", errors=[str(error)]).model_dump()
