"""
Account Catalog

The fixed, ordered list of accounts the user can track.
Account ids double as positions in the balance vector, so the
catalog is validated once at construction and never changes afterwards.
"""

from typing import Iterable, Iterator

from savings_tracker.errors import AccountNotFoundError, OutOfRangeError
from savings_tracker.models.ledger import Account


DEFAULT_ACCOUNT_LABELS = (
    "(006)合作金庫(5880)",
    "(013)國泰世華(2882)",
    "(017)兆豐銀行(2886)",
    "(048)王道銀行(2897)",
    "(103)新光銀行(2888)",
    "(396)街口支付(6038)",
    "(700)中華郵政",
    "(808)玉山銀行(2884)",
    "(812)台新銀行(2887)",
    "(822)中國信託(2891)",
)


class AccountCatalog:
    """
    Immutable, index-aligned account list.

    Lookups by label are exact matches; the UI is expected to hand back
    one of the labels it was given.
    """

    def __init__(self, accounts: Iterable[Account]):
        self._accounts = tuple(accounts)
        if not self._accounts:
            raise ValueError("Account catalog cannot be empty")

        for position, account in enumerate(self._accounts):
            if account.id != position:
                raise ValueError(
                    f"Account {account.label!r} has id {account.id}, "
                    f"expected {position}"
                )

        self._index_by_label = {
            account.label: account.id for account in self._accounts
        }
        if len(self._index_by_label) != len(self._accounts):
            raise ValueError("Account labels must be unique")

    @classmethod
    def from_labels(cls, labels: Iterable[str]) -> "AccountCatalog":
        """Build a catalog, numbering accounts in the given order."""
        return cls(
            Account(id=index, label=label)
            for index, label in enumerate(labels)
        )

    @classmethod
    def default(cls) -> "AccountCatalog":
        return cls.from_labels(DEFAULT_ACCOUNT_LABELS)

    def list_accounts(self) -> tuple[Account, ...]:
        return self._accounts

    def index_of(self, label: str) -> int:
        """
        Resolve a display label to its account index.

        Raises:
            AccountNotFoundError: If no account carries this label
        """
        try:
            return self._index_by_label[label]
        except KeyError:
            raise AccountNotFoundError(label) from None

    def label_for(self, index: int) -> str:
        """
        Get the display label of an account.

        Raises:
            OutOfRangeError: If index is not a catalog position
        """
        if not 0 <= index < len(self._accounts):
            raise OutOfRangeError(index, len(self._accounts))
        return self._accounts[index].label

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts)
