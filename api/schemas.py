"""Request schemas validated at the HTTP boundary.

Each schema knows the user-facing message for its failures: one message when
required fields are missing, and optional per-field messages for malformed
values.
"""

from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Dict, List, Literal, Optional, Type, TypeVar
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)
from errors import ValidationError
from models.transaction import TRANSACTION_TYPES, TransactionFilters

USERNAME_PATTERN = r"^[a-zA-Z0-9_]{3,20}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# Largest amount accepted; keeps the stored REAL and its sums finite
MAX_AMOUNT = Decimal("999999999999.99")

_MISSING_ERROR_TYPES = {"missing", "model_type", "model_attributes_type"}

TRANSACTION_FIELD_MESSAGES = {
    "category_id": "类别、金额、类型和日期不能为空",
    "amount": "金额必须为正数",
    "type": "类型必须为收入或支出",
    "transaction_date": "日期格式不正确",
    "date": "日期格式不正确",
}


class RequestModel(BaseModel):
    """Base schema; empty values (None or "") count as missing."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    required_message: ClassVar[str] = "请求参数不完整"
    field_messages: ClassVar[Dict[str, str]] = {}

    @model_validator(mode="before")
    @classmethod
    def _drop_empty(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None and v != ""}
        return data

    @classmethod
    def error_message(cls, errors: List[dict]) -> str:
        """Pick the message for a list of pydantic errors."""
        if any(err["type"] in _MISSING_ERROR_TYPES for err in errors):
            return cls.required_message
        loc = errors[0].get("loc") or ()
        field = loc[0] if loc else None
        return cls.field_messages.get(field, cls.required_message)


ModelT = TypeVar("ModelT", bound=RequestModel)


def parse_payload(model: Type[ModelT], data: Any) -> ModelT:
    """Validate request data against a schema.

    Args:
        model: RequestModel subclass.
        data: Parsed JSON body or query-string dict (None is treated as {}).

    Returns:
        The validated model instance.

    Raises:
        ValidationError: With the schema's user-facing message.
    """
    try:
        return model.model_validate(data if data is not None else {})
    except PydanticValidationError as e:
        raise ValidationError(model.error_message(e.errors())) from e


class RegisterRequest(RequestModel):
    required_message: ClassVar[str] = "用户名、密码和邮箱不能为空"
    field_messages: ClassVar[Dict[str, str]] = {
        "username": "用户名只能包含字母、数字和下划线，长度在3-20个字符",
        "email": "邮箱格式不正确",
        "password": "密码长度至少为6个字符",
    }

    # Declared in the order the checks are reported
    username: str = Field(pattern=USERNAME_PATTERN)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)


class LoginRequest(RequestModel):
    required_message: ClassVar[str] = "用户名和密码不能为空"

    username: str
    password: str


class TransactionRequest(RequestModel):
    """Body of /transaction/add. The date may be sent as 'date'."""

    required_message: ClassVar[str] = "类别、金额、类型和日期不能为空"
    field_messages: ClassVar[Dict[str, str]] = TRANSACTION_FIELD_MESSAGES

    category_id: int = Field(gt=0)
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    type: Literal["income", "expense"]
    transaction_date: date = Field(
        validation_alias=AliasChoices("transaction_date", "date")
    )
    description: Optional[str] = None


class TransactionUpdateRequest(TransactionRequest):
    required_message: ClassVar[str] = "ID、类别、金额、类型和日期不能为空"
    field_messages: ClassVar[Dict[str, str]] = {
        **TRANSACTION_FIELD_MESSAGES,
        "id": "ID、类别、金额、类型和日期不能为空",
    }

    id: int = Field(gt=0)


class TransactionIdQuery(RequestModel):
    required_message: ClassVar[str] = "交易记录ID不能为空"

    id: int = Field(gt=0)


class DateRangeQuery(RequestModel):
    """Required start/end dates; parsing is left to the statistics service."""

    required_message: ClassVar[str] = "开始日期和结束日期不能为空"

    start_date: str
    end_date: str


class TransactionQuery(RequestModel):
    """Filters for listing transactions. Unknown types are ignored."""

    field_messages: ClassVar[Dict[str, str]] = {
        "start_date": "日期格式不正确",
        "end_date": "日期格式不正确",
        "category_id": "类别ID格式不正确",
    }

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type: Optional[str] = None
    category_id: Optional[int] = None

    @field_validator("type")
    @classmethod
    def _known_type_only(cls, value: Optional[str]) -> Optional[str]:
        return value if value in TRANSACTION_TYPES else None

    def to_filters(self) -> TransactionFilters:
        return TransactionFilters(
            start_date=self.start_date,
            end_date=self.end_date,
            type=self.type,
            category_id=self.category_id,
        )


class ExportQuery(TransactionQuery):
    required_message: ClassVar[str] = "开始日期和结束日期不能为空"

    start_date: date
    end_date: date
