from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.hr_timekeeping.hr_timekeeping.core.enums import PayrollStatus
from src.hr_timekeeping.hr_timekeeping.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from src.hr_timekeeping.hr_timekeeping.payroll.model import SalaryStructure
from src.hr_timekeeping.hr_timekeeping.payroll.service import PayrollService

PAID_AT = datetime(2024, 4, 1, 10, 0)


@pytest.fixture
def service(payroll_repo) -> PayrollService:
    return PayrollService(payroll_repo)


@pytest.fixture
def structures(payroll_repo):
    payroll_repo.upsert_salary_structure(
        SalaryStructure(employee_id=1, basic_salary=Decimal("3000"), hra=Decimal("500"), tax_deduction=Decimal("300"))
    )
    payroll_repo.upsert_salary_structure(SalaryStructure(employee_id=2, basic_salary=Decimal("2000")))


def test_generate_creates_draft_payslips(service, payroll_repo, structures, hr_ctx):
    assert service.generate(hr_ctx, month=3, year=2024) == 2

    records = service.list_records(month=3, year=2024)
    assert {r.employee_id: r.net_salary for r in records} == {1: Decimal("3200.00"), 2: Decimal("2000.00")}
    assert all(r.status == PayrollStatus.DRAFT for r in records)


def test_generate_rejects_existing_period(service, structures, hr_ctx):
    service.generate(hr_ctx, month=3, year=2024)
    with pytest.raises(ValidationError):
        service.generate(hr_ctx, month=3, year=2024)


def test_generate_requires_salary_structures(service, hr_ctx):
    with pytest.raises(ValidationError):
        service.generate(hr_ctx, month=3, year=2024)


def test_generate_requires_admin_or_hr(service, structures, employee_ctx):
    with pytest.raises(AuthorizationError):
        service.generate(employee_ctx, month=3, year=2024)


def test_generate_rejects_invalid_month(service, structures, hr_ctx):
    with pytest.raises(ValidationError):
        service.generate(hr_ctx, month=0, year=2024)


def test_paid_stamps_paid_at_and_is_terminal(service, payroll_repo, structures, hr_ctx):
    service.generate(hr_ctx, month=3, year=2024)

    service.update_status(hr_ctx, payroll_id=1, status=PayrollStatus.PAID, now=PAID_AT)
    assert payroll_repo.get_record(1).paid_at == PAID_AT

    with pytest.raises(InvalidTransitionError):
        service.update_status(hr_ctx, payroll_id=1, status=PayrollStatus.DRAFT)


def test_processed_back_to_draft_clears_paid_at(service, payroll_repo, structures, hr_ctx):
    service.generate(hr_ctx, month=3, year=2024)

    service.update_status(hr_ctx, payroll_id=2, status=PayrollStatus.PROCESSED)
    service.update_status(hr_ctx, payroll_id=2, status=PayrollStatus.DRAFT)

    record = payroll_repo.get_record(2)
    assert record.status == PayrollStatus.DRAFT
    assert record.paid_at is None


def test_bulk_update_is_all_or_nothing(service, payroll_repo, structures, hr_ctx):
    service.generate(hr_ctx, month=3, year=2024)
    service.update_status(hr_ctx, payroll_id=1, status=PayrollStatus.PAID, now=PAID_AT)

    with pytest.raises(InvalidTransitionError):
        service.bulk_update_status(hr_ctx, payroll_ids=[1, 2], status=PayrollStatus.PROCESSED)
    assert payroll_repo.get_record(2).status == PayrollStatus.DRAFT

    assert service.bulk_update_status(hr_ctx, payroll_ids=[2], status=PayrollStatus.PROCESSED) == 1


def test_bulk_update_validates_selection(service, structures, hr_ctx):
    service.generate(hr_ctx, month=3, year=2024)
    with pytest.raises(ValidationError):
        service.bulk_update_status(hr_ctx, payroll_ids=[], status=PayrollStatus.PAID)
    with pytest.raises(NotFoundError):
        service.bulk_update_status(hr_ctx, payroll_ids=[99], status=PayrollStatus.PAID)


def test_save_salary_structure_validates_amounts(service, payroll_repo, hr_ctx):
    saved = service.save_salary_structure(
        hr_ctx,
        employee_id=5,
        basic_salary="4500.00",
        effective_from=date(2024, 1, 1),
        components={"hra": "250", "tax_deduction": None},
    )
    assert saved.hra == Decimal("250")
    assert saved.tax_deduction == Decimal("0")
    assert payroll_repo.structures[5] == saved

    with pytest.raises(ValidationError):
        service.save_salary_structure(hr_ctx, employee_id=5, basic_salary="0", effective_from=date(2024, 1, 1))
    with pytest.raises(ValidationError):
        service.save_salary_structure(
            hr_ctx, employee_id=5, basic_salary="100", effective_from=date(2024, 1, 1), components={"hra": "-1"}
        )
    with pytest.raises(ValidationError):
        service.save_salary_structure(
            hr_ctx, employee_id=5, basic_salary="100", effective_from=date(2024, 1, 1), components={"bonus": "1"}
        )


def test_list_salary_structures_includes_net(service, structures):
    by_employee = {s["employee_id"]: s for s in service.list_salary_structures()}
    assert by_employee[1]["net_salary"] == Decimal("3200.00")
    assert by_employee[1]["total_allowances"] == Decimal("500.00")


def test_stats(service, structures, hr_ctx):
    service.generate(hr_ctx, month=3, year=2024)
    service.update_status(hr_ctx, payroll_id=1, status=PayrollStatus.PROCESSED)

    stats = service.stats(month=3, year=2024)
    assert stats["total_payroll"] == Decimal("5200.00")
    assert stats["record_count"] == 2
    assert stats["avg_salary"] == Decimal("2600.00")
    assert stats["pending"] == 1
