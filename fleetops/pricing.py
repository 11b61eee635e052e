"""
Work order pricing - discount, markup and multi-level total calculations.

Totals are built bottom-up:

1. each job line / part gets its gross (hours x rate, quantity x unit price) minus the
   discounts targeted at that line,
2. untargeted labor discounts apply to the labor subtotal, parts discounts to the parts
   subtotal,
3. work-order discounts apply to what is left of labor + parts,
4. tax is charged on the discounted subtotal.

Discounts never push an amount below zero. All money is Decimal, rounded half-up to cents.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

Number = Union[int, float, Decimal, str]

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")

PERCENTAGE = "percentage"
FIXED_AMOUNT = "fixed_amount"
DISCOUNT_KINDS = (PERCENTAGE, FIXED_AMOUNT)

SCOPE_LABOR = "labor"
SCOPE_PARTS = "parts"
SCOPE_WORK_ORDER = "work_order"
DISCOUNT_SCOPES = (SCOPE_LABOR, SCOPE_PARTS, SCOPE_WORK_ORDER)


def to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from dragging binary noise into the sum
    return Decimal(str(value))


def round_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def validate_discount(kind: str, value: Number) -> None:
    """Raise ValueError for an unusable discount definition"""
    if kind not in DISCOUNT_KINDS:
        raise ValueError(f"discount type must be one of {', '.join(DISCOUNT_KINDS)}")
    amount = to_decimal(value)
    if amount <= ZERO:
        raise ValueError("Discount value must be greater than 0")
    if kind == PERCENTAGE and amount > HUNDRED:
        raise ValueError("Percentage discount cannot exceed 100%")


def calculate_discount_amount(base: Number, kind: str, value: Number) -> Decimal:
    """
    Amount a discount takes off `base`.

    Percentage discounts take value% of the base; fixed discounts take the value itself.
    The result is capped at the base so a discount can never make an amount negative.
    """
    validate_discount(kind, value)
    base_amount = max(to_decimal(base), ZERO)
    if kind == PERCENTAGE:
        amount = base_amount * to_decimal(value) / HUNDRED
    else:
        amount = to_decimal(value)
    return round_money(min(amount, base_amount))


def calculate_markup_price(supplier_cost: Number, markup_percentage: Number) -> Decimal:
    """Customer price from supplier cost and markup: cost x (1 + markup / 100)"""
    cost = to_decimal(supplier_cost)
    markup = to_decimal(markup_percentage)
    if cost < ZERO:
        raise ValueError("Supplier cost must be positive")
    if markup < ZERO:
        raise ValueError("Markup percentage must be positive")
    return round_money(cost * (1 + markup / HUNDRED))


def calculate_markup_percentage(supplier_cost: Number, customer_price: Number) -> Decimal:
    """Inverse of calculate_markup_price; 0 when there is no supplier cost"""
    cost = to_decimal(supplier_cost)
    if cost <= ZERO:
        return ZERO
    return round_money((to_decimal(customer_price) - cost) / cost * HUNDRED)


def labor_line_total(estimated_hours: Number, labor_rate: Number) -> Decimal:
    return round_money(to_decimal(estimated_hours) * to_decimal(labor_rate))


def part_line_total(quantity: Number, unit_price: Number) -> Decimal:
    return round_money(to_decimal(quantity) * to_decimal(unit_price))


@dataclass
class LaborLine:
    id: Optional[int]
    estimated_hours: Number
    labor_rate: Number

    @property
    def gross(self) -> Decimal:
        return labor_line_total(self.estimated_hours, self.labor_rate)


@dataclass
class PartLine:
    id: Optional[int]
    quantity: Number
    unit_price: Number

    @property
    def gross(self) -> Decimal:
        return part_line_total(self.quantity, self.unit_price)


@dataclass
class Discount:
    kind: str
    value: Number
    scope: str
    target_id: Optional[int] = None  # job line id (labor) or part id (parts)
    id: Optional[int] = None


@dataclass
class AppliedDiscount:
    discount: Discount
    base: Decimal
    amount: Decimal


@dataclass
class WorkOrderTotals:
    labor_subtotal: Decimal = ZERO
    labor_line_discounts: Decimal = ZERO
    labor_discounts: Decimal = ZERO
    labor_total: Decimal = ZERO
    parts_subtotal: Decimal = ZERO
    parts_line_discounts: Decimal = ZERO
    parts_discounts: Decimal = ZERO
    parts_total: Decimal = ZERO
    work_order_discounts: Decimal = ZERO
    discount_total: Decimal = ZERO
    subtotal: Decimal = ZERO
    tax_rate: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total: Decimal = ZERO
    applied: list = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "labor_subtotal": float(self.labor_subtotal),
            "labor_line_discounts": float(self.labor_line_discounts),
            "labor_discounts": float(self.labor_discounts),
            "labor_total": float(self.labor_total),
            "parts_subtotal": float(self.parts_subtotal),
            "parts_line_discounts": float(self.parts_line_discounts),
            "parts_discounts": float(self.parts_discounts),
            "parts_total": float(self.parts_total),
            "work_order_discounts": float(self.work_order_discounts),
            "discount_total": float(self.discount_total),
            "subtotal": float(self.subtotal),
            "tax_rate": float(self.tax_rate),
            "tax_amount": float(self.tax_amount),
            "total": float(self.total),
        }


def _apply_line_discounts(lines, discounts: list[Discount], applied: list) -> tuple[Decimal, Decimal]:
    """Return (gross, discount) summed over lines, discounting each line against its own gross"""
    gross_total = ZERO
    discount_total = ZERO
    for line in lines:
        gross = line.gross
        gross_total += gross
        line_discount = ZERO
        for discount in discounts:
            if discount.target_id != line.id:
                continue
            amount = calculate_discount_amount(gross, discount.kind, discount.value)
            # Sibling discounts are not compounded, but together they cannot exceed the line
            amount = min(amount, gross - line_discount)
            line_discount += amount
            applied.append(AppliedDiscount(discount, gross, amount))
        discount_total += line_discount
    return gross_total, discount_total


def _apply_sequential(base: Decimal, discounts: list[Discount], applied: list) -> Decimal:
    """Apply discounts one after another, each against what the previous ones left"""
    remaining = base
    for discount in discounts:
        amount = calculate_discount_amount(remaining, discount.kind, discount.value)
        applied.append(AppliedDiscount(discount, remaining, amount))
        remaining -= amount
    return base - remaining


def calculate_work_order_totals(
    labor_lines: Iterable[LaborLine],
    part_lines: Iterable[PartLine],
    discounts: Iterable[Discount] = (),
    tax_rate: Number = 0,
) -> WorkOrderTotals:
    labor_lines = list(labor_lines)
    part_lines = list(part_lines)
    discounts = list(discounts)
    rate = to_decimal(tax_rate)
    if rate < ZERO:
        raise ValueError("Tax rate cannot be negative")

    for discount in discounts:
        if discount.scope not in DISCOUNT_SCOPES:
            raise ValueError(f"Unknown discount scope: {discount.scope}")
        if discount.scope == SCOPE_WORK_ORDER and discount.target_id is not None:
            raise ValueError("Work order discounts cannot target a single line")

    labor_ids = {line.id for line in labor_lines}
    part_ids = {line.id for line in part_lines}
    for discount in discounts:
        if discount.target_id is None:
            continue
        known = labor_ids if discount.scope == SCOPE_LABOR else part_ids
        if discount.target_id not in known:
            raise ValueError(f"Discount targets unknown {discount.scope} line {discount.target_id}")

    applied: list[AppliedDiscount] = []
    totals = WorkOrderTotals(tax_rate=rate, applied=applied)

    def scoped(scope: str, targeted: bool) -> list[Discount]:
        return [d for d in discounts if d.scope == scope and (d.target_id is not None) == targeted]

    # 1. line level
    totals.labor_subtotal, totals.labor_line_discounts = _apply_line_discounts(
        labor_lines, scoped(SCOPE_LABOR, True), applied
    )
    totals.parts_subtotal, totals.parts_line_discounts = _apply_line_discounts(
        part_lines, scoped(SCOPE_PARTS, True), applied
    )

    # 2. category level
    totals.labor_discounts = _apply_sequential(
        totals.labor_subtotal - totals.labor_line_discounts, scoped(SCOPE_LABOR, False), applied
    )
    totals.parts_discounts = _apply_sequential(
        totals.parts_subtotal - totals.parts_line_discounts, scoped(SCOPE_PARTS, False), applied
    )
    totals.labor_total = totals.labor_subtotal - totals.labor_line_discounts - totals.labor_discounts
    totals.parts_total = totals.parts_subtotal - totals.parts_line_discounts - totals.parts_discounts

    # 3. work order level
    totals.work_order_discounts = _apply_sequential(
        totals.labor_total + totals.parts_total, scoped(SCOPE_WORK_ORDER, False), applied
    )

    totals.discount_total = sum((a.amount for a in applied), ZERO)
    totals.subtotal = totals.labor_total + totals.parts_total - totals.work_order_discounts

    # 4. tax
    totals.tax_amount = round_money(totals.subtotal * rate)
    totals.total = totals.subtotal + totals.tax_amount
    return totals
