"""
payroll_config -- single public entrypoint for statutory tables and pay policy.

Responsibility:
    Provides the runtime way to obtain the statutory tables and pay
    policy the engines are parameterized with: ``get_statutory_tables()``
    and ``get_pay_policy()``.  YAML parsing lives in ``loader``.

Architecture position:
    Configuration -- sits beside ``payroll_kernel``.  Engines receive the
    resulting frozen objects as arguments and never read files
    themselves; the core never chooses which table version applies.

Failure modes:
    - ``FileNotFoundError`` -- no table set with the requested version.
    - ``ValueError`` -- a table set is structurally invalid.

Audit relevance:
    Every load emits a ``PAYROLL_CONFIG_TRACE`` log entry with the
    version, effective date, source path and checksum, tying each payroll
    run back to the exact tables that governed it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from payroll_config.loader import load_config_set
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

_logger = logging.getLogger("payroll_kernel.config")

_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

DEFAULT_VERSION = "ph-2024"


def list_available_versions(config_dir: Path | None = None) -> list[str]:
    """Return the versions of all table sets in ``config_dir``, sorted."""
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    return sorted(p.stem for p in sets_dir.glob("*.yaml"))


def get_config_set(
    version: str | None = None,
    config_dir: Path | None = None,
) -> PayrollConfigSet:
    """Load, validate and trace one table set.

    Args:
        version: Table-set version (file stem). Defaults to ``DEFAULT_VERSION``.
        config_dir: Override path to table sets. Defaults to payroll_config/sets/.

    Raises:
        FileNotFoundError: If no table set with that version exists.
        ValueError: If the file's declared version does not match its
            name, or any table fails validation.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    version = version or DEFAULT_VERSION
    path = sets_dir / f"{version}.yaml"
    if not path.exists():
        raise FileNotFoundError(
            f"No statutory table set {version!r} in {sets_dir} "
            f"(available: {list_available_versions(sets_dir)})"
        )

    config_set = load_config_set(path)
    if config_set.tables.version != version:
        raise ValueError(
            f"Table set {path.name} declares version "
            f"{config_set.tables.version!r}, expected {version!r}"
        )

    _logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "trace_type": "PAYROLL_CONFIG_TRACE",
            "table_version": config_set.tables.version,
            "effective_from": config_set.tables.effective_from.isoformat(),
            "source_path": config_set.source_path,
            "checksum": config_set.checksum,
            "social_insurance_bands": len(config_set.tables.social_insurance.bands),
            "tax_brackets": len(config_set.tables.income_tax.brackets),
        },
    )
    return config_set


def get_statutory_tables(
    version: str | None = None,
    config_dir: Path | None = None,
) -> StatutoryTables:
    """Return the statutory tables of one table set."""
    return get_config_set(version, config_dir).tables


def get_pay_policy(
    version: str | None = None,
    config_dir: Path | None = None,
) -> PayPolicy:
    """Return the pay policy of one table set."""
    return get_config_set(version, config_dir).policy


__all__ = [
    "DEFAULT_VERSION",
    "HealthInsuranceTable",
    "HousingFundTable",
    "IncomeTaxTable",
    "PayPolicy",
    "PayrollConfigSet",
    "PremiumRates",
    "RateBasis",
    "SalaryCreditBand",
    "ShiftPolicy",
    "SocialInsuranceTable",
    "StatutoryTables",
    "TaxBracket",
    "get_config_set",
    "get_pay_policy",
    "get_statutory_tables",
    "list_available_versions",
]
