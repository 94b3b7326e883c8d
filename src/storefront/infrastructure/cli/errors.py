"""Maps domain errors to CLI failures.

Each error category gets its own exit code so scripts can tell a bad
request from a missing entity from a conflict with current state.
"""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException

EXIT_CODES = {
    "bad-request": 2,
    "not-found": 3,
    "conflict": 4,
}


class DomainClickException(click.ClickException):

    def __init__(self, exc: DomainException) -> None:
        super().__init__(f"[{exc.category}] {exc}")
        self.exit_code = EXIT_CODES.get(exc.category, 1)
