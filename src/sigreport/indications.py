"""Итоговая индикация подписи.

Два независимых шага: классификация сырого результата движка и
понижение по уровню квалификации, которого требует политика.
"""

from typing import List, NamedTuple, Optional, Tuple

from sigreport.models import Indication
from sigreport.policies import PolicyDefinition

NOT_QES_LEVEL_WARNING = "The signature is not in the Qualified Electronic Signature level"
LEVEL_NOT_MET_ERROR = "Signature/seal level do not meet the minimal level required by applied policy"

_PASSED_VALUES = {"TOTAL_PASSED", "TOTAL-PASSED", "PASSED", "VALID"}
_INDETERMINATE_VALUES = {"INDETERMINATE"}


class IndicationOutcome(NamedTuple):
    indication: Indication
    sub_indication: str
    warnings: List[str]
    errors: List[str]


def _normalize(raw: Optional[str]) -> str:
    return (raw or "").strip().upper()


def is_passed(raw_indication: Optional[str]) -> bool:
    return _normalize(raw_indication) in _PASSED_VALUES


def classify_indication(
    raw_indication: Optional[str],
    raw_sub_indication: Optional[str],
    has_container_errors: bool,
) -> Tuple[Indication, str]:
    raw = _normalize(raw_indication)
    if is_passed(raw) and not has_container_errors:
        return Indication.TOTAL_PASSED, ""
    if raw in _INDETERMINATE_VALUES and not has_container_errors:
        return Indication.INDETERMINATE, raw_sub_indication or ""
    return Indication.TOTAL_FAILED, raw_sub_indication or ""


def apply_level_policy(outcome: IndicationOutcome, level: str, policy: PolicyDefinition) -> IndicationOutcome:
    # Понижение действует только поверх положительного результата
    if outcome.indication != Indication.TOTAL_PASSED or not policy.requires_level:
        return outcome
    if level in policy.accepted_levels:
        return outcome
    if level in policy.warning_levels:
        return outcome._replace(warnings=outcome.warnings + [NOT_QES_LEVEL_WARNING])
    return outcome._replace(indication=Indication.TOTAL_FAILED, errors=outcome.errors + [LEVEL_NOT_MET_ERROR])


def resolve(
    level: str,
    raw_indication: Optional[str],
    raw_sub_indication: Optional[str],
    has_container_errors: bool,
    policy: PolicyDefinition,
    apply_policy: bool = True,
) -> IndicationOutcome:
    indication, sub_indication = classify_indication(raw_indication, raw_sub_indication, has_container_errors)
    outcome = IndicationOutcome(indication, sub_indication, [], [])
    if apply_policy:
        outcome = apply_level_policy(outcome, level, policy)
    return outcome
