"""Borrower generator for seeding the loanee directory."""

from __future__ import annotations

import random
from typing import Iterator

from loan_ledger.generators.base import BaseGenerator
from loan_ledger.models import Borrower, EmploymentStatus


class LoaneeGenerator(BaseGenerator):
    """Generate synthetic borrowers with unique national IDs and mobiles."""

    EMPLOYMENT_STATUS = list(EmploymentStatus)
    EMPLOYMENT_WEIGHTS = [0.7, 0.3]

    def generate(self) -> Borrower:
        """Generate a single borrower.

        Returns
        -------
        Borrower
            Generated borrower details.
        """
        employment = random.choices(
            self.EMPLOYMENT_STATUS, weights=self.EMPLOYMENT_WEIGHTS, k=1
        )[0]
        name = self.fake.name()

        return Borrower(
            name=name,
            national_id=self.fake.unique.numerify("########"),
            mobile=self.fake.unique.numerify("07########"),
            # About a third of borrowers leave email blank
            email=self.fake.email() if self.fake.boolean(chance_of_getting_true=65) else None,
            employment_status=employment,
        )

    def generate_batch(self, count: int) -> Iterator[Borrower]:
        """Generate multiple borrowers.

        Parameters
        ----------
        count : int
            Number of borrowers to generate.

        Yields
        ------
        Borrower
            Generated borrowers.
        """
        for _ in range(count):
            yield self.generate()
