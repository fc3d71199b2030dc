"""Populate a ledger with a realistic sample portfolio."""

from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import Decimal

from loan_ledger.exceptions import DuplicateLoaneeError
from loan_ledger.generators.base import BaseGenerator
from loan_ledger.generators.loanee import LoaneeGenerator
from loan_ledger.issuance import LoanRequest
from loan_ledger.ledger import Ledger
from loan_ledger.logging import get_logger
from loan_ledger.models import Loan, RepaymentPeriod

logger = get_logger(__name__)


class SampleLedgerGenerator(BaseGenerator):
    """Issue loans and record repayments through a Ledger's own intents.

    Everything goes through the same validation and commands as real input,
    so generated data satisfies every ledger invariant.
    """

    # Term length choices per repayment period
    TERMS = {
        RepaymentPeriod.DAYS: [14, 30, 45, 60],
        RepaymentPeriod.WEEKS: [4, 8, 12, 26],
        RepaymentPeriod.MONTHS: [3, 6, 12, 24],
    }
    PERIOD_WEIGHTS = [0.1, 0.3, 0.6]

    def __init__(self, seed: int | None = None, locale: str = "en_US") -> None:
        super().__init__(seed, locale)
        self._loanees = LoaneeGenerator(seed=seed, locale=locale)

    def populate(
        self,
        ledger: Ledger,
        num_loanees: int = 10,
        max_loans_per_loanee: int = 2,
        max_repayments_per_loan: int = 4,
    ) -> dict[str, int]:
        """Register loanees, issue their loans and record repayments.

        Parameters
        ----------
        ledger : Ledger
            Ledger to populate.
        num_loanees : int
            Number of loanees to generate. Any whose national ID or mobile is
            already registered are skipped.
        max_loans_per_loanee : int
            Upper bound of loans issued per loanee (at least one each).
        max_repayments_per_loan : int
            Upper bound of repayments recorded per loan.

        Returns
        -------
        dict[str, int]
            Ledger summary counts after population.
        """
        today = ledger.today()
        for borrower in self._loanees.generate_batch(num_loanees):
            first_loan = today - timedelta(days=random.randint(30, 365))
            try:
                loanee = ledger.register_loanee(
                    name=borrower.name,
                    national_id=borrower.national_id,
                    mobile=borrower.mobile,
                    email=borrower.email,
                    employment_status=borrower.employment_status,
                    date_added=first_loan,
                )
            except DuplicateLoaneeError as exc:
                logger.info("Skipping sample loanee already in the directory: %s", exc)
                continue

            for _ in range(random.randint(1, max(1, max_loans_per_loanee))):
                offset = random.randint(0, (today - first_loan).days)
                request = self._loan_request(
                    ledger, loanee.to_borrower(), first_loan + timedelta(days=offset)
                )
                loan = ledger.issue_loan(request)
                self._repay(ledger, loan, today, max_repayments_per_loan)

        summary = ledger.state.summary()
        logger.info("Generated sample ledger: %s", summary)
        return summary

    def _loan_request(self, ledger: Ledger, borrower, issuance_date: date) -> LoanRequest:
        period = random.choices(list(RepaymentPeriod), weights=self.PERIOD_WEIGHTS, k=1)[0]
        return LoanRequest(
            amount=Decimal(random.randint(5, 100) * 1000),
            loan_type=random.choice(ledger.settings.loan_types),
            repayment_period=period,
            repayment_period_value=random.choice(self.TERMS[period]),
            borrower=borrower,
            issuance_date=issuance_date,
            interest_rate=ledger.settings.default_interest_rate,
        )

    def _repay(self, ledger: Ledger, loan: Loan, today: date, max_repayments: int) -> None:
        days_open = (today - loan.issuance_date).days
        count = random.randint(0, max_repayments)
        payment_dates = sorted(
            loan.issuance_date + timedelta(days=random.randint(0, days_open)) for _ in range(count)
        )

        principal_left = loan.amount
        interest_left = loan.total_interest
        for index, payment_date in enumerate(payment_dates):
            if principal_left <= 0 and interest_left <= 0:
                break
            # The last payment of some loans clears the balance
            if index == len(payment_dates) - 1 and random.random() < 0.4:
                principal, interest = principal_left, interest_left
            else:
                share = Decimal(random.randint(10, 40)) / 100
                principal = (loan.amount * share).quantize(Decimal("1"))
                interest = (loan.total_interest * share).quantize(Decimal("1"))
                principal, interest = min(principal, principal_left), min(interest, interest_left)
            if principal <= 0 and interest <= 0:
                continue

            ledger.record_repayment(
                loan.loan_number,
                principal_amount=principal,
                interest_amount=interest,
                payment_channel=random.choice(ledger.settings.payment_channels),
                date=payment_date,
            )
            principal_left -= principal
            interest_left -= interest
