"""Tests for the payment plan rules (installments, cross-payment, edit history, bulk rows)."""

from decimal import Decimal

import pytest

from app.core.exceptions import CustomerValidationError
from app.models import Customer
from app.schemas.customer import BulkPaymentRow, InstallmentCreate
from app.services import payment_plan


def pay(amount, **kwargs) -> InstallmentCreate:
    return InstallmentCreate(received_amount=amount, **kwargs)


class TestAppendInstallment:
    """Sequencing and totals."""

    def test_numbers_are_one_to_n_in_call_order(self, plot_customer: Customer) -> None:
        for amount in (1000, 2000, 3000, 4000, 5000):
            payment_plan.append_installment(plot_customer, pay(amount))

        numbers = [i.installment_no for i in plot_customer.installments]
        assert numbers == [1, 2, 3, 4, 5]
        assert [i.received_amount for i in plot_customer.installments] == [
            Decimal("1000"), Decimal("2000"), Decimal("3000"), Decimal("4000"), Decimal("5000")
        ]

    def test_next_number_follows_max_existing(self, plot_customer: Customer) -> None:
        payment_plan.append_installment(plot_customer, pay(100))
        plot_customer.installments[0].installment_no = 7

        installment = payment_plan.append_installment(plot_customer, pay(100))

        assert installment.installment_no == 8

    def test_end_to_end_running_totals(self, plot_customer: Customer) -> None:
        first = payment_plan.append_installment(plot_customer, pay(30000))

        assert plot_customer.received_amount == Decimal("30000")
        assert plot_customer.balance_amount == Decimal("70000")
        assert first.installment_no == 1
        assert len(plot_customer.installments) == 1

        second = payment_plan.append_installment(plot_customer, pay(20000))

        assert plot_customer.received_amount == Decimal("50000")
        assert plot_customer.balance_amount == Decimal("50000")
        assert second.installment_no == 2
        assert plot_customer.installments[1].installment_no == 2

    def test_totals_match_installment_sum(self, plot_customer: Customer) -> None:
        for amount in ("12500.50", 7000, "bad", None, 499.5):
            payment_plan.append_installment(plot_customer, pay(amount))

        received = sum(i.received_amount for i in plot_customer.installments)
        assert plot_customer.received_amount == received == Decimal("20000.00")
        assert plot_customer.balance_amount == plot_customer.total_amount - plot_customer.received_amount

    def test_defaults(self, plot_customer: Customer) -> None:
        installment = payment_plan.append_installment(plot_customer, pay(5000))

        assert installment.status == "Pending"
        assert installment.installment_amount == Decimal("5000")
        assert installment.balance_amount == Decimal("0")
        assert installment.remark == ""
        assert installment.bank_name == ""

    def test_payment_metadata_is_kept(self, plot_customer: Customer) -> None:
        installment = payment_plan.append_installment(plot_customer, pay(
            5000,
            installment_amount=10000,
            installment_date="2026-03-01",
            bank_name="SBI",
            payment_mode="Cheque",
            cheque_no="004512",
            cheque_date="2026-02-28",
            status="Paid",
        ))

        assert installment.installment_amount == Decimal("10000")
        assert installment.received_amount == Decimal("5000")
        assert installment.cheque_no == "004512"
        assert installment.status == "Paid"

    def test_bad_numbers_coerce_to_zero(self, plot_customer: Customer) -> None:
        data = InstallmentCreate.model_validate({"receivedAmount": "twenty", "installmentAmount": "NaN"})

        installment = payment_plan.append_installment(plot_customer, data)

        assert installment.received_amount == Decimal("0")
        assert installment.installment_amount == Decimal("0")
        assert plot_customer.received_amount == Decimal("0")
        assert plot_customer.balance_amount == Decimal("100000")

    def test_unset_total_takes_installment_amount(self) -> None:
        customer = Customer(customer_id="C-2", name="No Total")

        payment_plan.append_installment(customer, pay(5000))

        assert customer.total_amount == Decimal("5000")
        assert customer.balance_amount == Decimal("0")

    def test_unset_total_prefers_fallback(self) -> None:
        customer = Customer(customer_id="C-3", name="No Total")

        payment_plan.append_installment(customer, pay(5000), fallback_total=Decimal("80000"))

        assert customer.total_amount == Decimal("80000")
        assert customer.balance_amount == Decimal("75000")

    def test_missing_identity_is_rejected(self) -> None:
        with pytest.raises(CustomerValidationError):
            payment_plan.append_installment(Customer(name="Nobody"), pay(100))


class TestCrossPayment:
    """Transfer flag on the source customer."""

    def test_sets_transfer_marker(self, plot_customer: Customer) -> None:
        assert payment_plan.link_cross_payment(plot_customer, "C-2002") is True
        assert plot_customer.cross_payment_flag == "Transferred to C-2002"

    def test_repeat_with_same_target_is_stable(self, plot_customer: Customer) -> None:
        payment_plan.link_cross_payment(plot_customer, "C-2002")
        payment_plan.link_cross_payment(plot_customer, "C-2002")

        assert plot_customer.cross_payment_flag == "Transferred to C-2002"

    def test_new_target_overwrites(self, plot_customer: Customer) -> None:
        payment_plan.link_cross_payment(plot_customer, "C-2002")
        payment_plan.link_cross_payment(plot_customer, "C-3003")

        assert plot_customer.cross_payment_flag == "Transferred to C-3003"

    def test_self_reference_is_noop(self, plot_customer: Customer) -> None:
        plot_customer.cross_payment_flag = ""

        assert payment_plan.link_cross_payment(plot_customer, "C-1001") is False
        assert plot_customer.cross_payment_flag == ""

    def test_missing_source_is_noop(self) -> None:
        assert payment_plan.link_cross_payment(None, "C-2002") is False


class TestEditHistory:
    """Snapshots are taken before each update."""

    def test_one_snapshot_per_call(self, plot_customer: Customer) -> None:
        payment_plan.record_edit(plot_customer)
        payment_plan.record_edit(plot_customer)
        payment_plan.record_edit(plot_customer)

        assert [h.seq for h in plot_customer.edit_history] == [1, 2, 3]

    def test_snapshots_hold_prior_values(self, plot_customer: Customer) -> None:
        payment_plan.record_edit(plot_customer, edited_by="Asha")
        plot_customer.name = "Ravi K."
        payment_plan.record_edit(plot_customer, edited_by="Asha")
        plot_customer.name = "Ravi Kumar Patil"

        first, second = plot_customer.edit_history
        assert first.previous_data["name"] == "Ravi Kumar"
        assert second.previous_data["name"] == "Ravi K."
        assert first.edited_by == "Asha"
        assert first.edited_at <= second.edited_at

    def test_snapshot_is_json_safe(self, plot_customer: Customer) -> None:
        payment_plan.append_installment(plot_customer, pay(2500))

        snapshot = payment_plan.snapshot_customer(plot_customer)

        assert snapshot["total_amount"] == 100000.0
        assert snapshot["received_amount"] == 2500.0
        assert snapshot["installments"][0]["installment_no"] == 1
        assert "customer_ref" not in snapshot["installments"][0]

    def test_explicit_prior_data(self, plot_customer: Customer) -> None:
        entry = payment_plan.record_edit(plot_customer, prior_data={"name": "Before"})

        assert entry.previous_data == {"name": "Before"}


class TestBulkApplyPayment:
    """Import rows keyed by customer_id."""

    def test_creates_then_appends(self) -> None:
        row = BulkPaymentRow.model_validate({"customerId": "C1", "totalAmount": 50000, "receivedAmount": 10000})

        customer = payment_plan.bulk_apply_payment(None, row)

        assert customer.customer_id == "C1"
        assert customer.total_amount == Decimal("50000")
        assert customer.received_amount == Decimal("10000")
        assert customer.balance_amount == Decimal("40000")
        assert customer.status == "Active Customer"
        assert len(customer.installments) == 1
        first = customer.installments[0]
        assert first.installment_no == 1
        assert first.status == "Completed"
        assert first.remark == "SaleDeed Pending"
        assert first.balance_amount == Decimal("40000")

        again = BulkPaymentRow.model_validate({"customerId": "C1", "receivedAmount": 5000})
        same = payment_plan.bulk_apply_payment(customer, again)

        assert same is customer
        assert customer.installments[1].installment_no == 2
        assert customer.received_amount == Decimal("15000")
        assert customer.balance_amount == Decimal("35000")

    def test_new_customer_uses_row_fields(self) -> None:
        row = BulkPaymentRow.model_validate({
            "customerId": "C9",
            "name": "Meena Shah",
            "date": "2026-01-15",
            "village": "Hadapsar",
            "totalAmount": "200000",
            "receivedAmount": "25000",
            "remark": "Token",
            "status": "SALEDEED DONE",
            "callingBy": '["Asha"]',
        })

        customer = payment_plan.bulk_apply_payment(None, row)

        assert customer.name == "Meena Shah"
        assert customer.village == "Hadapsar"
        assert customer.status == "SALEDEED DONE"
        assert customer.calling_by == ["Asha"]
        assert customer.installments[0].installment_date == "2026-01-15"
        assert customer.installments[0].remark == "Token"

    def test_new_customer_totals_follow_row_even_without_total(self) -> None:
        row = BulkPaymentRow.model_validate({"customerId": "C5", "receivedAmount": 1000})

        customer = payment_plan.bulk_apply_payment(None, row)

        assert customer.total_amount == Decimal("0")
        assert customer.received_amount == Decimal("1000")
        assert customer.balance_amount == Decimal("-1000")

    def test_rerun_is_not_idempotent(self) -> None:
        row = BulkPaymentRow.model_validate({"customerId": "C1", "totalAmount": 50000, "receivedAmount": 10000})

        customer = payment_plan.bulk_apply_payment(None, row)
        payment_plan.bulk_apply_payment(customer, row)

        assert len(customer.installments) == 2
        assert customer.received_amount == Decimal("20000")

    def test_dedup_hook_spots_same_payment(self) -> None:
        row = BulkPaymentRow.model_validate({
            "customerId": "C1", "date": "2026-02-01", "receivedAmount": 10000, "chequeNo": "77"
        })
        customer = payment_plan.bulk_apply_payment(None, row)

        assert payment_plan.payment_already_recorded(customer, row) is True
        other = row.model_copy(update={"cheque_no": "78"})
        assert payment_plan.payment_already_recorded(customer, other) is False
        assert payment_plan.payment_already_recorded(None, row) is False

    def test_row_without_customer_id_is_rejected(self) -> None:
        with pytest.raises(CustomerValidationError):
            payment_plan.bulk_apply_payment(None, BulkPaymentRow(received_amount=100))
