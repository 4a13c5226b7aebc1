"""Unit tests for mapping persisted loans onto scoring input"""

import uuid
from datetime import date
from lending_gateway.domain.models import InstallmentStatus, LoanPurpose, LoanStatus, LoanType
from lending_gateway.domain.scoring import build_credit_report
from lending_gateway.infrastructure.database.models import Loan, LoanInstallment
from lending_gateway.infrastructure.database.repositories import to_loan_record


def _loan(**fields) -> Loan:
    values = dict(
        id=uuid.uuid4(),
        status="Active",
        loan_amount=5000.0,
        loan_purpose="Car",
        loan_term=12,
        remaining_term=12,
        interest_rate=8.5,
        lender_name="Standard Bank",
        loan_type="Credit",
        credit_limit=10000.0,
    )
    values.update(fields)
    loan = Loan(**values)
    loan.installments = [LoanInstallment(sequence=1, due_date=date(2026, 2, 15), amount=436.09, status="Pending")]
    return loan


def test_loan_record_fields_are_plain_strings():
    loan = _loan(status=LoanStatus.ACTIVE, loan_purpose=LoanPurpose.CAR, loan_type=LoanType.CREDIT)
    loan.installments[0].status = InstallmentStatus.PENDING

    record = to_loan_record(loan)

    assert type(record.status) is str and record.status == "Active"
    assert type(record.loan_purpose) is str and record.loan_purpose == "Car"
    assert type(record.loan_type) is str and record.loan_type == "Credit"
    assert type(record.repayment_schedule[0].status) is str
    assert record.loan_id == str(loan.id)


def test_enum_and_string_rows_score_identically():
    as_enums = to_loan_record(_loan(status=LoanStatus.ACTIVE, loan_purpose=LoanPurpose.CAR, loan_type=LoanType.CREDIT))
    as_strings = to_loan_record(_loan())

    enum_report = build_credit_report([as_enums])
    string_report = build_credit_report([as_strings])

    assert enum_report.credit_score == string_report.credit_score
    assert enum_report.available_credit == string_report.available_credit == 5000
    assert enum_report.accounts[0].type == "Car Loan"
