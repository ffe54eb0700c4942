"""
Form schemas

Raw form fields are validated here before anything reaches the record
store. The accessors themselves accept whatever they are given.
"""
import math
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator, model_validator

from negocio.schemas.order import OrderStatus, PaymentStatus


class FormError(Exception):
    """Form input rejected; carries the messages to show inline"""

    def __init__(self, messages: List[str]):
        super().__init__("; ".join(messages))
        self.messages = messages


def error_messages(error: ValidationError) -> List[str]:
    """Flatten a pydantic ValidationError into user-facing messages"""
    messages = []
    for item in error.errors():
        message = item["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        else:
            field = ".".join(str(part) for part in item["loc"])
            message = f"{field}: {message}" if field else message
        if message not in messages:
            messages.append(message)
    return messages


def _required_text(value: Any, message: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(message)
    return str(value).strip()


def _number(value: Any, message: str, minimum: float, exclusive: bool = False) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(message)
    if not math.isfinite(number) or number < minimum or (exclusive and number == minimum):
        raise ValueError(message)
    return number


def _whole_number(value: Any, message: str, minimum: int) -> int:
    number = _number(value, message, minimum)
    if not number.is_integer():
        raise ValueError(message)
    return int(number)


def _at(values: Sequence[str], index: int) -> Optional[str]:
    return values[index] if index < len(values) else None


class FormModel(BaseModel):
    """Base for HTML form payloads: strips text and treats blanks as missing"""

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, values):
        if isinstance(values, dict):
            return {
                key: (value.strip() or None) if isinstance(value, str) else value
                for key, value in values.items()
            }
        return values

    @classmethod
    def parse(cls, data: Dict[str, Any]):
        """
        Validate raw form data

        Raises:
            FormError: With one message per rejected field
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise FormError(error_messages(e))

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump()


class CustomerForm(FormModel):
    """New/edit customer form"""
    name: str = Field("", validate_default=True)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name_required(cls, value):
        return _required_text(value, "Name is required")


class ProductForm(FormModel):
    """New/edit product form"""
    name: str = Field("", validate_default=True)
    description: Optional[str] = None
    price: float = Field(None, validate_default=True)
    sku: Optional[str] = Field(None, max_length=100)
    stock_quantity: int = Field(None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def _name_required(cls, value):
        return _required_text(value, "Name is required")

    @field_validator("price", mode="before")
    @classmethod
    def _valid_price(cls, value):
        return _number(value, "Valid price is required", 0, exclusive=True)

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def _valid_stock(cls, value):
        return _whole_number(value, "Valid stock quantity is required", 0)


class OrderItemForm(FormModel):
    """One line item row of the new-sale or add-item form"""
    product_id: str = Field("", validate_default=True)
    quantity: int = Field(1, validate_default=True)
    unit_price: Optional[float] = None

    @field_validator("product_id", mode="before")
    @classmethod
    def _product_required(cls, value):
        return _required_text(value, "Product is required")

    @field_validator("quantity", mode="before")
    @classmethod
    def _valid_quantity(cls, value):
        return _whole_number(value, "Quantity must be a whole number of at least 1", 1)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _valid_unit_price(cls, value):
        if value is None:
            return None
        return _number(value, "Unit price must be a number of at least 0", 0)

    def to_line(self, price_lookup: Callable[[str], Optional[float]]) -> Dict[str, Any]:
        """
        Resolve the row into insertable line-item fields

        A blank unit price falls back to the product's current price.
        """
        unit_price = self.unit_price
        if unit_price is None:
            unit_price = price_lookup(self.product_id)
            if unit_price is None:
                raise FormError([f"Unknown product {self.product_id}"])
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": unit_price,
            "total_price": round(self.quantity * unit_price, 2),
        }


class OrderForm(FormModel):
    """New/edit sale header, plus line items on the new-sale form"""
    customer_id: str = Field("", validate_default=True)
    order_date: Optional[date] = None
    total_amount: Optional[float] = None
    status: str = OrderStatus.PENDING.value
    payment_status: str = PaymentStatus.UNPAID.value
    notes: Optional[str] = None
    items: List[OrderItemForm] = []

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer_required(cls, value):
        return _required_text(value, "Customer is required")

    @field_validator("total_amount", mode="before")
    @classmethod
    def _valid_total(cls, value):
        if value is None:
            return None
        return _number(value, "Total amount must be a number of at least 0", 0)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value):
        return value or OrderStatus.PENDING.value

    @field_validator("payment_status", mode="before")
    @classmethod
    def _default_payment_status(cls, value):
        return value or PaymentStatus.UNPAID.value

    @staticmethod
    def collect_items(
        product_ids: Sequence[str],
        quantities: Sequence[str],
        unit_prices: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """Zip the repeated line-item inputs into rows, skipping rows with no product"""
        rows = []
        for index, product_id in enumerate(product_ids):
            if not product_id or not product_id.strip():
                continue
            rows.append({
                "product_id": product_id,
                "quantity": _at(quantities, index),
                "unit_price": _at(unit_prices, index),
            })
        return rows

    def line_items(self, price_lookup: Callable[[str], Optional[float]]) -> List[Dict[str, Any]]:
        return [item.to_line(price_lookup) for item in self.items]

    def header_fields(self, items: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        """
        Order header columns to write

        A blank total becomes the sum of the given line items; with no items
        given (edit form) a blank total or date leaves the stored value alone.
        """
        fields = {
            "customer_id": self.customer_id,
            "status": self.status,
            "payment_status": self.payment_status,
            "notes": self.notes,
        }
        if self.order_date is not None:
            fields["order_date"] = datetime.combine(self.order_date, time.min, tzinfo=timezone.utc)
        if self.total_amount is not None:
            fields["total_amount"] = self.total_amount
        elif items is not None:
            fields["total_amount"] = round(sum(item["total_price"] for item in items), 2)
        return fields


class OrderItemUpdateForm(FormModel):
    """Quantity and unit price of an existing line item on the edit-sale form"""
    id: str = Field("", validate_default=True)
    quantity: int = Field(None, validate_default=True)
    unit_price: float = Field(None, validate_default=True)

    @field_validator("id", mode="before")
    @classmethod
    def _id_required(cls, value):
        return _required_text(value, "Line item id is required")

    @field_validator("quantity", mode="before")
    @classmethod
    def _valid_quantity(cls, value):
        return _whole_number(value, "Quantity must be a whole number of at least 1", 1)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _valid_unit_price(cls, value):
        return _number(value, "Unit price must be a number of at least 0", 0)

    def to_fields(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_price": round(self.quantity * self.unit_price, 2),
        }

    @classmethod
    def parse_many(
        cls,
        item_ids: Sequence[str],
        quantities: Sequence[str],
        unit_prices: Sequence[str],
    ) -> List["OrderItemUpdateForm"]:
        messages: List[str] = []
        forms = []
        for index, item_id in enumerate(item_ids):
            try:
                forms.append(cls.parse({
                    "id": item_id,
                    "quantity": _at(quantities, index),
                    "unit_price": _at(unit_prices, index),
                }))
            except FormError as e:
                messages.extend(m for m in e.messages if m not in messages)
        if messages:
            raise FormError(messages)
        return forms
