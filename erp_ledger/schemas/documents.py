"""
Pydantic schemas for source business documents.

Domain modules (Sales, Procurement, Payments, Inventory,
Payroll) hand these to the posting strategies, which turn
them into balanced journal lines.
"""

import enum
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from pydantic import BaseModel, Field, model_validator


CENTS = Decimal("0.01")


# --- Sales ---

class SalesDocLine(BaseModel):
    description: str = Field(default="", max_length=255)
    quantity: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0)
    # Cost of goods shipped per unit; zero for services
    unit_cost: Decimal = Field(default=Decimal("0"), ge=0)
    # Product master fallback when the shipment carries no cost
    default_cost: Decimal | None = Field(default=None, ge=0)

    @property
    def amount(self) -> Decimal:
        return (self.quantity * self.unit_price).quantize(CENTS, ROUND_HALF_UP)

    @property
    def effective_unit_cost(self) -> Decimal:
        if self.unit_cost > 0:
            return self.unit_cost
        return self.default_cost or Decimal("0")

    @property
    def cost(self) -> Decimal:
        return (self.quantity * self.effective_unit_cost).quantize(
            CENTS, ROUND_HALF_UP
        )


class SalesDoc(BaseModel):
    id: str
    doc_type: str = "invoice"
    number: str | None = None
    issue_date: date
    lines: list[SalesDocLine] = Field(min_length=1)
    tax_amount: Decimal = Field(default=Decimal("0"), ge=0)

    @property
    def subtotal(self) -> Decimal:
        return sum((line.amount for line in self.lines), Decimal("0"))

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax_amount


# --- Procurement ---

class PurchaseDocLine(BaseModel):
    description: str = Field(default="", max_length=255)
    quantity: Decimal = Field(gt=0)
    unit_cost: Decimal = Field(ge=0)
    # Goods go to inventory, services to expense
    is_goods: bool = True

    @property
    def amount(self) -> Decimal:
        return (self.quantity * self.unit_cost).quantize(CENTS, ROUND_HALF_UP)


class PurchaseDoc(BaseModel):
    id: str
    doc_type: str = "invoice"
    number: str | None = None
    issue_date: date
    lines: list[PurchaseDocLine] = Field(min_length=1)
    tax_amount: Decimal = Field(default=Decimal("0"), ge=0)

    @property
    def total(self) -> Decimal:
        return sum((line.amount for line in self.lines), Decimal("0")) + self.tax_amount


# --- Payments ---

class PaymentType(str, enum.Enum):
    RECEIPT = "receipt"
    PAYMENT = "payment"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    BANK = "bank"


class PaymentAllocation(BaseModel):
    document_id: str
    amount: Decimal = Field(gt=0)


class Payment(BaseModel):
    id: str
    type: PaymentType
    method: PaymentMethod = PaymentMethod.BANK
    payment_date: date
    reference: str | None = None
    allocations: list[PaymentAllocation] = Field(default_factory=list)

    @property
    def total_allocated(self) -> Decimal:
        return sum((a.amount for a in self.allocations), Decimal("0"))


# --- Inventory ---

class MovementType(str, enum.Enum):
    RECEIPT = "receipt"
    ISSUE = "issue"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"


class InventoryMovement(BaseModel):
    product_id: str
    movement_type: MovementType
    # Signed for adjustments (negative = write-down), positive otherwise
    quantity: Decimal
    unit_cost: Decimal = Field(default=Decimal("0"), ge=0)
    # Product master fallback when the movement carries no cost
    default_cost: Decimal | None = Field(default=None, ge=0)
    from_warehouse_id: str | None = None
    to_warehouse_id: str | None = None
    reference: str | None = None

    @model_validator(mode="after")
    def check_quantity(self) -> "InventoryMovement":
        if self.quantity == 0:
            raise ValueError(f"{self.product_id}: quantity must not be zero")
        if self.quantity < 0 and self.movement_type != MovementType.ADJUSTMENT:
            raise ValueError(
                f"{self.product_id}: only adjustments may have a negative quantity"
            )
        return self

    @property
    def effective_unit_cost(self) -> Decimal:
        if self.unit_cost > 0:
            return self.unit_cost
        if self.movement_type in (MovementType.RECEIPT, MovementType.ADJUSTMENT):
            return self.default_cost or Decimal("0")
        return Decimal("0")

    @property
    def value(self) -> Decimal:
        """Absolute cost of the movement at the effective unit cost."""
        return (abs(self.quantity) * self.effective_unit_cost).quantize(
            CENTS, ROUND_HALF_UP
        )


class InventoryBatch(BaseModel):
    """A set of movements recorded together (one transaction set)."""
    id: str
    movement_date: date
    movements: list[InventoryMovement] = Field(min_length=1)


# --- Payroll ---

class ComputationMode(str, enum.Enum):
    FIXED_AMOUNT = "fixed_amount"
    PERCENT_OF_BASIS = "percent_of_basis"


class EarningOrDeduction(BaseModel):
    """
    A named earning or deduction on a payroll line.

    The amount is resolved once, when the value is built, from
    either a fixed amount or a percent of a basis. The resolved
    amount is what gets stored and posted; it is never recomputed
    from the percent later.
    """
    name: str = Field(min_length=1, max_length=100)
    mode: ComputationMode
    fixed_amount: Decimal | None = Field(default=None, ge=0)
    percent: Decimal | None = Field(default=None, ge=0, le=100)
    basis: Decimal | None = Field(default=None, ge=0)
    amount: Decimal = Decimal("0")

    @model_validator(mode="after")
    def resolve_amount(self) -> "EarningOrDeduction":
        if self.mode == ComputationMode.FIXED_AMOUNT:
            if self.fixed_amount is None:
                raise ValueError(f"{self.name}: fixed_amount is required")
            resolved = self.fixed_amount
        else:
            if self.percent is None or self.basis is None:
                raise ValueError(f"{self.name}: percent and basis are required")
            resolved = self.basis * self.percent / Decimal("100")
        self.amount = resolved.quantize(CENTS, ROUND_HALF_UP)
        return self


class PayrollLine(BaseModel):
    employee_id: str
    earnings: list[EarningOrDeduction] = Field(default_factory=list)
    taxes: list[EarningOrDeduction] = Field(default_factory=list)
    deductions: list[EarningOrDeduction] = Field(default_factory=list)
    employer_contributions: list[EarningOrDeduction] = Field(default_factory=list)
    is_included: bool = True

    @property
    def gross_pay(self) -> Decimal:
        return sum((e.amount for e in self.earnings), Decimal("0"))

    @property
    def total_taxes(self) -> Decimal:
        return sum((t.amount for t in self.taxes), Decimal("0"))

    @property
    def total_deductions(self) -> Decimal:
        return sum((d.amount for d in self.deductions), Decimal("0"))

    @property
    def employer_cost(self) -> Decimal:
        return sum((c.amount for c in self.employer_contributions), Decimal("0"))

    @property
    def net_pay(self) -> Decimal:
        return self.gross_pay - self.total_taxes - self.total_deductions


class PayrollRun(BaseModel):
    id: str
    period_start: date
    period_end: date
    pay_date: date
    lines: list[PayrollLine] = Field(min_length=1)

    @property
    def included_lines(self) -> list[PayrollLine]:
        return [line for line in self.lines if line.is_included]
