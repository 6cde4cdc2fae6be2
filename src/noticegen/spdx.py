"""SPDX license expression handling built on ``license_expression``."""

from __future__ import annotations

import re
from functools import lru_cache

from license_expression import (
    ExpressionError,
    LicenseSymbol,
    LicenseWithExceptionSymbol,
    Licensing,
    get_spdx_licensing,
)

__all__ = ["ExpressionError", "is_single_requirement", "license_ids", "single_requirement"]

# Older crates separate alternatives with "/" ("MIT/Apache-2.0").
_LEGACY_OR_RE = re.compile(r"\s*/\s*")
# npm's way of pointing at a custom license file.
_FILE_REFERENCE_RE = re.compile(r"^SEE LICENSE IN\s+\S", re.IGNORECASE)


@lru_cache(maxsize=1)
def spdx_licensing() -> Licensing:
    """SPDX-aware licensing, loaded once per process."""
    return get_spdx_licensing()


def _parse(expression: str):
    return spdx_licensing().parse(_LEGACY_OR_RE.sub(" OR ", expression.strip()))


def _render(symbol) -> str:
    return symbol.render("{symbol.key}")


def license_ids(expression: str | None) -> frozenset[str]:
    """Return every license requirement named in ``expression``.

    Identifiers known to SPDX come back in their canonical spelling. ``WITH``
    exceptions stay attached to their license (``"Apache-2.0 WITH
    LLVM-exception"``) and the legacy ``/`` separator reads as ``OR``. An npm
    ``SEE LICENSE IN <file>`` reference is kept verbatim as one requirement.

    Raises:
        ExpressionError: If ``expression`` is not a valid license expression

    Examples:
        >>> sorted(license_ids("MIT OR (Apache-2.0 AND BSD-3-Clause)"))
        ['Apache-2.0', 'BSD-3-Clause', 'MIT']
        >>> sorted(license_ids("MIT/Apache-2.0"))
        ['Apache-2.0', 'MIT']
    """
    if not expression or not expression.strip():
        return frozenset()
    if _FILE_REFERENCE_RE.match(expression.strip()):
        return frozenset({expression.strip()})

    parsed = _parse(expression)
    if parsed is None:
        return frozenset()
    symbols = spdx_licensing().license_symbols(parsed, unique=True, decompose=False)
    return frozenset(_render(symbol) for symbol in symbols)


def single_requirement(value: str) -> str | None:
    """Canonical spelling of ``value`` if it names exactly one requirement, else None."""
    if not value.strip():
        return None
    if _FILE_REFERENCE_RE.match(value.strip()):
        return value.strip()
    try:
        parsed = _parse(value)
    except ExpressionError:
        return None
    if isinstance(parsed, (LicenseSymbol, LicenseWithExceptionSymbol)):
        return _render(parsed)
    return None


def is_single_requirement(value: str) -> bool:
    return single_requirement(value) is not None
