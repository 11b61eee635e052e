from decimal import Decimal

import pytest

from fleetops.pricing import (
    FIXED_AMOUNT,
    PERCENTAGE,
    SCOPE_LABOR,
    SCOPE_PARTS,
    SCOPE_WORK_ORDER,
    Discount,
    LaborLine,
    PartLine,
    calculate_discount_amount,
    calculate_markup_percentage,
    calculate_markup_price,
    calculate_work_order_totals,
    labor_line_total,
    round_money,
    to_decimal,
)


class TestDiscountAmount:
    def test_percentage_of_base(self):
        assert calculate_discount_amount(200, PERCENTAGE, 10) == Decimal("20.00")

    def test_fixed_amount(self):
        assert calculate_discount_amount(200, FIXED_AMOUNT, 35.5) == Decimal("35.50")

    def test_fixed_amount_capped_at_base(self):
        assert calculate_discount_amount(200, FIXED_AMOUNT, 500) == Decimal("200.00")

    def test_full_percentage_zeroes_base(self):
        assert calculate_discount_amount("99.99", PERCENTAGE, 100) == Decimal("99.99")

    @pytest.mark.parametrize(
        "kind,value",
        [(PERCENTAGE, 0), (PERCENTAGE, -5), (PERCENTAGE, 100.01), (FIXED_AMOUNT, 0), ("bogus", 10)],
    )
    def test_rejects_invalid_definitions(self, kind, value):
        with pytest.raises(ValueError):
            calculate_discount_amount(100, kind, value)


class TestMarkup:
    def test_markup_price(self):
        assert calculate_markup_price(10, 25) == Decimal("12.50")

    def test_markup_price_rounds_half_up(self):
        assert calculate_markup_price("19.99", 15) == Decimal("22.99")

    def test_zero_markup_keeps_cost(self):
        assert calculate_markup_price(42, 0) == Decimal("42.00")

    def test_negative_inputs_rejected(self):
        with pytest.raises(ValueError):
            calculate_markup_price(-1, 10)
        with pytest.raises(ValueError):
            calculate_markup_price(10, -1)

    def test_markup_percentage(self):
        assert calculate_markup_percentage(10, "12.50") == Decimal("25.00")

    def test_markup_percentage_without_cost(self):
        assert calculate_markup_percentage(0, 30) == Decimal("0")


def test_money_helpers_avoid_float_noise():
    assert to_decimal(0.1) + to_decimal(0.2) == Decimal("0.3")
    assert round_money(Decimal("2.675")) == Decimal("2.68")
    assert labor_line_total(1.5, 80) == Decimal("120.00")


class TestWorkOrderTotals:
    def setup_method(self):
        self.labor = [LaborLine(1, 2, 100), LaborLine(2, 1.5, 80)]
        self.parts = [PartLine(10, 2, "25.50"), PartLine(11, 1, 49)]

    def test_without_discounts(self):
        totals = calculate_work_order_totals(self.labor, self.parts, tax_rate=0.08)
        assert totals.labor_subtotal == Decimal("320.00")
        assert totals.parts_subtotal == Decimal("100.00")
        assert totals.subtotal == Decimal("420.00")
        assert totals.tax_amount == Decimal("33.60")
        assert totals.total == Decimal("453.60")
        assert totals.discount_total == Decimal("0")

    def test_multi_level_discounts(self):
        discounts = [
            Discount(PERCENTAGE, 10, SCOPE_LABOR, target_id=1, id=1),
            Discount(FIXED_AMOUNT, 30, SCOPE_LABOR, id=2),
            Discount(PERCENTAGE, 10, SCOPE_PARTS, id=3),
            Discount(PERCENTAGE, 5, SCOPE_WORK_ORDER, id=4),
        ]
        totals = calculate_work_order_totals(self.labor, self.parts, discounts, tax_rate=0.08)

        assert totals.labor_line_discounts == Decimal("20.00")
        assert totals.labor_discounts == Decimal("30.00")
        assert totals.labor_total == Decimal("270.00")
        assert totals.parts_discounts == Decimal("10.00")
        assert totals.parts_total == Decimal("90.00")
        assert totals.work_order_discounts == Decimal("18.00")
        assert totals.discount_total == Decimal("78.00")
        assert totals.subtotal == Decimal("342.00")
        assert totals.tax_amount == Decimal("27.36")
        assert totals.total == Decimal("369.36")

        amounts = {applied.discount.id: applied.amount for applied in totals.applied}
        assert amounts == {1: Decimal("20.00"), 2: Decimal("30.00"), 3: Decimal("10.00"), 4: Decimal("18.00")}

    def test_line_discounts_do_not_exceed_the_line(self):
        discounts = [
            Discount(PERCENTAGE, 60, SCOPE_LABOR, target_id=1, id=1),
            Discount(PERCENTAGE, 60, SCOPE_LABOR, target_id=1, id=2),
        ]
        totals = calculate_work_order_totals(self.labor, [], discounts)
        # both are 60% of the 200 gross, the second only gets what is left
        assert [a.amount for a in totals.applied] == [Decimal("120.00"), Decimal("80.00")]
        assert totals.labor_total == Decimal("120.00")

    def test_work_order_discounts_apply_in_sequence(self):
        discounts = [
            Discount(PERCENTAGE, 10, SCOPE_WORK_ORDER, id=1),
            Discount(FIXED_AMOUNT, 50, SCOPE_WORK_ORDER, id=2),
        ]
        totals = calculate_work_order_totals([LaborLine(1, 10, 100)], [], discounts)
        assert totals.work_order_discounts == Decimal("150.00")
        assert totals.subtotal == Decimal("850.00")

    def test_total_never_negative(self):
        discounts = [Discount(FIXED_AMOUNT, 10_000, SCOPE_WORK_ORDER)]
        totals = calculate_work_order_totals(self.labor, self.parts, discounts, tax_rate=0.1)
        assert totals.subtotal == Decimal("0")
        assert totals.total == Decimal("0")

    def test_empty_work_order(self):
        totals = calculate_work_order_totals([], [], tax_rate=0.08)
        assert totals.total == Decimal("0")
        assert totals.as_dict()["total"] == 0.0

    def test_rejects_targeted_work_order_discount(self):
        with pytest.raises(ValueError):
            calculate_work_order_totals(self.labor, self.parts, [Discount(PERCENTAGE, 5, SCOPE_WORK_ORDER, target_id=1)])

    def test_rejects_unknown_target(self):
        with pytest.raises(ValueError):
            calculate_work_order_totals(self.labor, self.parts, [Discount(PERCENTAGE, 5, SCOPE_PARTS, target_id=1)])

    def test_rejects_negative_tax(self):
        with pytest.raises(ValueError):
            calculate_work_order_totals(self.labor, self.parts, tax_rate=-0.01)
