# schemas — форма контента (content), правила wizard (forms) и конверты ответов API (common).
from app.schemas.common import ErrorResponse, SuccessResponse
from app.schemas.content import ContentDomain, OnboardingData, default_content
from app.schemas.forms import ValidationResult, validate_fields

__all__ = [
    "SuccessResponse",
    "ErrorResponse",
    "ContentDomain",
    "OnboardingData",
    "default_content",
    "ValidationResult",
    "validate_fields",
]
