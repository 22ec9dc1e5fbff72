from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    status_code: int

    @classmethod
    def validation(cls, message: str) -> ApiError:
        return cls("VALIDATION_ERROR", message, 422)
