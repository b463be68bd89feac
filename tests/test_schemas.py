"""Tests for request parsing at the API boundary."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.models import CustomerStatus
from app.schemas.customer import CustomerCreate, CustomerUpdate, InstallmentCreate, parse_staff_list


class TestStaffLists:
    def test_list_is_trimmed_and_deduplicated(self) -> None:
        assert parse_staff_list([" Asha ", "Vikram", "Asha", ""]) == ["Asha", "Vikram"]

    def test_json_string(self) -> None:
        assert parse_staff_list('["Asha", "Vikram"]') == ["Asha", "Vikram"]

    def test_blank_string_is_empty_list(self) -> None:
        assert parse_staff_list("") == []

    def test_none_stays_unset(self) -> None:
        assert parse_staff_list(None) is None

    @pytest.mark.parametrize("value", ["Asha", '{"a": 1}', "[1, 2]", 42])
    def test_rejects_non_lists(self, value) -> None:
        with pytest.raises(ValueError):
            parse_staff_list(value)

    def test_invalid_staff_field_fails_validation(self) -> None:
        with pytest.raises(ValidationError):
            CustomerCreate.model_validate({"customerId": "C1", "name": "A", "callingBy": "not json"})


class TestCustomerPayloads:
    def test_camel_case_keys(self) -> None:
        data = CustomerCreate.model_validate({
            "customerId": "C1",
            "name": "Ravi",
            "totalAmount": "1,00,000",
            "siteVisitBy": ["Asha"],
            "paidByCustomerId": "C0",
            "status": "Cancelled",
        })

        assert data.customer_id == "C1"
        assert data.total_amount == Decimal("100000.00")
        assert data.site_visit_by == ["Asha"]
        assert data.paid_by_customer_id == "C0"
        assert data.status is CustomerStatus.CANCELLED

    def test_snake_case_keys_also_accepted(self) -> None:
        data = CustomerCreate(customer_id="C1", name="Ravi", booking_area="1200")

        assert data.booking_area == Decimal("1200.00")

    def test_lenient_amounts(self) -> None:
        data = CustomerCreate.model_validate({"customerId": "C1", "rate": "abc", "discount": ""})

        assert data.rate == Decimal("0")
        assert data.discount is None

    def test_unknown_status_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CustomerCreate.model_validate({"customerId": "C1", "status": "Sold"})

    def test_update_ignores_derived_fields(self) -> None:
        data = CustomerUpdate.model_validate({"receivedAmount": 5, "balanceAmount": 1, "customerId": "X"})

        dumped = data.model_dump(exclude_unset=True)
        assert dumped == {}

    def test_installment_status_accepts_completed(self) -> None:
        data = InstallmentCreate.model_validate({"receivedAmount": "500", "status": "Completed"})

        assert data.received_amount == Decimal("500.00")
        assert data.status.value == "Completed"
