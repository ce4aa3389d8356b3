"""Account registry - BAS chart of accounts.

The BAS chart is divided into classes by the leading digit:
- 1xxx: Assets
- 2xxx: Equity and liabilities
- 3xxx: Operating revenue
- 4xxx: Cost of goods
- 5-6xxx: Other external expenses
- 7xxx: Personnel
- 8xxx: Financial items and taxes

Classification is by exact code first, then by the longest registered
prefix rule. A code matched by neither is an error, never a default.
"""

import json
import os
from importlib import resources
from pathlib import Path
from typing import Iterable, Optional, Union

from ledgerkit.domain.entities import Account, AccountType, PrefixRule
from ledgerkit.domain.errors import ConflictError, UnknownAccountError, ValidationError
from ledgerkit.utils.logging import get_logger

log = get_logger("ledgerkit.accounts")

BAS_CLASSES = {
    1: "Tillgångar",
    2: "Eget kapital och skulder",
    3: "Rörelsens intäkter",
    4: "Rörelsens kostnader (varor)",
    5: "Övriga externa kostnader",
    6: "Övriga externa kostnader",
    7: "Personal",
    8: "Finansiella poster och skatter",
}

# Curated subsets used by the liquidity ratio
CASH_PREFIXES = ("19",)
RECEIVABLE_PREFIXES = ("15",)


def account_class(code: str) -> int:
    """Return BAS account class (leading digit) for a code, 0 if not numeric."""
    if code and code[0].isdigit():
        return int(code[0])
    return 0


class AccountRegistry:
    """Mapping from account code to classification."""

    def __init__(
        self,
        accounts: Iterable[Account] = (),
        prefix_rules: Iterable[PrefixRule] = (),
    ):
        self._accounts: dict[str, Account] = {}
        self._prefix_rules: dict[str, PrefixRule] = {}
        for account in accounts:
            self.register(account)
        for rule in prefix_rules:
            self.register_prefix(rule)

    def register(self, account: Account) -> None:
        """Register an account under its exact code.

        Raises:
            ConflictError: If the code is already registered
        """
        if not account.code:
            raise ValidationError("Account code must not be empty")
        if account.code in self._accounts:
            raise ConflictError(f"Account '{account.code}' is already registered")
        self._accounts[account.code] = account

    def register_prefix(self, rule: PrefixRule) -> None:
        """Register a prefix rule covering every code starting with rule.prefix."""
        if not rule.prefix:
            raise ValidationError("Prefix rule must have a non-empty prefix")
        if rule.prefix in self._prefix_rules:
            raise ConflictError(f"Prefix rule '{rule.prefix}' is already registered")
        self._prefix_rules[rule.prefix] = rule

    def _match_prefix(self, code: str) -> Optional[PrefixRule]:
        best: Optional[PrefixRule] = None
        for prefix, rule in self._prefix_rules.items():
            if code.startswith(prefix) and (best is None or len(prefix) > len(best.prefix)):
                best = rule
        return best

    def get(self, code: str) -> Account:
        """Resolve a code to its account.

        Raises:
            UnknownAccountError: If neither an exact account nor a prefix rule matches
        """
        account = self._accounts.get(code)
        if account is not None:
            return account

        rule = self._match_prefix(code)
        if rule is None:
            raise UnknownAccountError(code)
        return Account(
            code=code,
            name=rule.name or f"Konto {code}",
            type=rule.type,
            group=rule.group,
        )

    def classify(self, code: str) -> AccountType:
        return self.get(code).type

    def group(self, code: str) -> str:
        return self.get(code).group

    def is_registered(self, code: str) -> bool:
        return code in self._accounts or self._match_prefix(code) is not None

    def accounts(self) -> list[Account]:
        """Exactly registered accounts, sorted by code."""
        return [self._accounts[code] for code in sorted(self._accounts)]

    def prefix_rules(self) -> list[PrefixRule]:
        return [self._prefix_rules[prefix] for prefix in sorted(self._prefix_rules)]

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.is_registered(code)

    def __len__(self) -> int:
        return len(self._accounts)


def codes_with_prefix(codes: Iterable[str], prefixes: Iterable[str]) -> list[str]:
    """Filter codes to those starting with any of the prefixes."""
    prefixes = tuple(prefixes)
    return [code for code in codes if code.startswith(prefixes)]


def _parse_type(value: str, code: str) -> AccountType:
    try:
        return AccountType(value)
    except ValueError:
        raise ValidationError(f"Account '{code}' has unknown type '{value}'")


def registry_from_dict(data: dict) -> AccountRegistry:
    """Build a registry from chart data: {"accounts": [...], "prefix_rules": [...]}."""
    accounts = [
        Account(
            code=str(item["code"]),
            name=item.get("name", ""),
            type=_parse_type(item["type"], str(item["code"])),
            group=item.get("group") or "Övrigt",
        )
        for item in data.get("accounts", [])
    ]
    rules = [
        PrefixRule(
            prefix=str(item["prefix"]),
            type=_parse_type(item["type"], str(item["prefix"])),
            group=item.get("group") or "Övrigt",
            name=item.get("name", ""),
        )
        for item in data.get("prefix_rules", [])
    ]
    return AccountRegistry(accounts, rules)


def load_chart(path: Optional[Union[str, Path]] = None) -> AccountRegistry:
    """Load a chart of accounts.

    Args:
        path: JSON chart file. If None, checks LEDGERKIT_CHART_PATH environment
            variable, then falls back to the bundled BAS chart.

    Returns:
        AccountRegistry populated from the chart
    """
    if path is None:
        path = os.environ.get("LEDGERKIT_CHART_PATH")

    if path is None:
        text = resources.files("ledgerkit.data").joinpath("bas_chart.json").read_text(
            encoding="utf-8"
        )
        source = "bundled"
    else:
        text = Path(path).read_text(encoding="utf-8")
        source = str(path)

    registry = registry_from_dict(json.loads(text))
    log.info(
        "chart_loaded",
        source=source,
        accounts=len(registry),
        prefix_rules=len(registry.prefix_rules()),
    )
    return registry
