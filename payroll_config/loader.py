"""
Configuration Loader (``payroll_config.loader``).

Responsibility
--------------
Loads a YAML table-set document and parses it into the typed
``payroll_config.schema`` dataclasses.  Runtime callers go through
``payroll_config.get_statutory_tables()`` / ``get_pay_policy()``; this
module is the parsing layer underneath them and is used directly by
tests and tooling.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; required fields never fall back to silent defaults.
* Numeric fields are parsed into ``Decimal`` via their string form, so
  an unquoted YAML float still yields the exact decimal that was written.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  source document for configuration identity.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Invalid values or inconsistent tables  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date, time
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from payroll_config.schema import (
    HealthInsuranceTable,
    HousingFundTable,
    IncomeTaxTable,
    PayPolicy,
    PayrollConfigSet,
    PremiumRates,
    RateBasis,
    SalaryCreditBand,
    ShiftPolicy,
    SocialInsuranceTable,
    StatutoryTables,
    TaxBracket,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any, field_name: str = "value") -> Decimal:
    """Parse a Decimal from a YAML scalar (str, int or float)."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{field_name}: expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{field_name}: cannot parse {value!r} as a decimal") from exc


def parse_date(value: Any) -> date:
    """Parse a date from YAML (string or date object)."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError(f"Cannot parse date from {value!r}")


def parse_time(value: Any, field_name: str = "time") -> time:
    """
    Parse an ``HH:MM`` time of day.

    Times must be quoted in YAML: YAML 1.1 reads an unquoted ``22:00``
    as the base-60 integer 1320.
    """
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        return time.fromisoformat(value)
    raise ValueError(f"{field_name}: expected a quoted HH:MM string, got {value!r}")


def parse_salary_credit_band(data: dict[str, Any]) -> SalaryCreditBand:
    """Parse one MSC band row."""
    salary_to = data.get("salary_to")
    return SalaryCreditBand(
        salary_from=parse_decimal(data["salary_from"], "salary_from"),
        salary_to=None if salary_to is None else parse_decimal(salary_to, "salary_to"),
        credit=parse_decimal(data["credit"], "credit"),
    )


def parse_social_insurance(data: dict[str, Any]) -> SocialInsuranceTable:
    """Parse the social-insurance section."""
    return SocialInsuranceTable(
        label=data.get("label", "Social Insurance"),
        employee_rate=parse_decimal(data["employee_rate"], "employee_rate"),
        employer_rate=parse_decimal(data["employer_rate"], "employer_rate"),
        bands=tuple(parse_salary_credit_band(b) for b in data["bands"]),
    )


def parse_health_insurance(data: dict[str, Any]) -> HealthInsuranceTable:
    """Parse the health-insurance section."""
    return HealthInsuranceTable(
        label=data.get("label", "Health Insurance"),
        premium_rate=parse_decimal(data["premium_rate"], "premium_rate"),
        salary_floor=parse_decimal(data["salary_floor"], "salary_floor"),
        salary_ceiling=parse_decimal(data["salary_ceiling"], "salary_ceiling"),
    )


def parse_housing_fund(data: dict[str, Any]) -> HousingFundTable:
    """Parse the housing-fund section."""
    return HousingFundTable(
        label=data.get("label", "Housing Fund"),
        employee_rate=parse_decimal(data["employee_rate"], "employee_rate"),
        employer_rate=parse_decimal(data["employer_rate"], "employer_rate"),
        salary_cap=parse_decimal(data["salary_cap"], "salary_cap"),
        employee_contribution_cap=parse_decimal(
            data["employee_contribution_cap"], "employee_contribution_cap"
        ),
    )


def parse_tax_bracket(data: dict[str, Any]) -> TaxBracket:
    """Parse one income-tax bracket row."""
    return TaxBracket(
        threshold=parse_decimal(data["threshold"], "threshold"),
        base_tax=parse_decimal(data["base_tax"], "base_tax"),
        marginal_rate=parse_decimal(data["marginal_rate"], "marginal_rate"),
        excess_over=parse_decimal(data["excess_over"], "excess_over"),
    )


def parse_income_tax(data: dict[str, Any]) -> IncomeTaxTable:
    """Parse the income-tax section."""
    return IncomeTaxTable(
        label=data.get("label", "Income Tax"),
        brackets=tuple(parse_tax_bracket(b) for b in data["brackets"]),
    )


def parse_statutory_tables(data: dict[str, Any], checksum: str | None = None) -> StatutoryTables:
    """
    Parse a full ``StatutoryTables`` from a table-set dict.

    Raises:
        KeyError: if a required section or field is missing.
        ValueError: if any table is internally inconsistent.
    """
    return StatutoryTables(
        version=str(data["version"]),
        effective_from=parse_date(data["effective_from"]),
        social_insurance=parse_social_insurance(data["social_insurance"]),
        health_insurance=parse_health_insurance(data["health_insurance"]),
        housing_fund=parse_housing_fund(data["housing_fund"]),
        income_tax=parse_income_tax(data["income_tax"]),
        checksum=checksum,
    )


def parse_pay_policy(data: dict[str, Any] | None) -> PayPolicy:
    """
    Parse the optional ``pay_policy`` section.

    Omitted sub-sections and fields keep the schema defaults.
    """
    if not data:
        return PayPolicy()

    basis_data = data.get("rate_basis") or {}
    shift_data = data.get("shift") or {}
    premium_data = data.get("premiums") or {}

    basis_kwargs: dict[str, Any] = {
        key: int(basis_data[key])
        for key in ("working_days_per_month", "hours_per_day")
        if key in basis_data
    }

    shift_kwargs: dict[str, Any] = {}
    for key in ("shift_start", "shift_end", "night_start", "night_end"):
        if key in shift_data:
            shift_kwargs[key] = parse_time(shift_data[key], key)
    for key in (
        "regular_minutes_per_day",
        "default_lunch_minutes",
        "lunch_inference_threshold_minutes",
    ):
        if key in shift_data:
            shift_kwargs[key] = int(shift_data[key])

    premium_kwargs: dict[str, Any] = {
        key: parse_decimal(premium_data[key], key)
        for key in ("overtime_multiplier", "night_differential_rate", "holiday_multiplier")
        if key in premium_data
    }

    return PayPolicy(
        rate_basis=RateBasis(**basis_kwargs),
        shift=ShiftPolicy(**shift_kwargs),
        premiums=PremiumRates(**premium_kwargs),
    )


def load_config_set(path: Path) -> PayrollConfigSet:
    """
    Load and parse one YAML table-set file.

    Postconditions:
        - The returned set's ``checksum`` is the SHA-256 of the parsed
          source document, and is also stamped on its ``tables``.
    """
    data = load_yaml_file(path)
    checksum = compute_checksum(data)
    return PayrollConfigSet(
        tables=parse_statutory_tables(data, checksum=checksum),
        policy=parse_pay_policy(data.get("pay_policy")),
        checksum=checksum,
        source_path=str(path),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
