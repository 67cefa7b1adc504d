import logging
from typing import Dict, FrozenSet, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from sigreport.errors import InvalidPolicyError
from sigreport.models import Policy

logger = logging.getLogger(__name__)


class PolicyDefinition(BaseModel):
    """Именованная политика проверки.

    Уровни квалификации хранятся как данные политики: accepted_levels проходят
    без изменений, warning_levels проходят с предупреждением, остальные уровни
    отклоняются. Пустой accepted_levels означает, что политика уровень не требует.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    url: str
    accepted_levels: FrozenSet[str] = frozenset()
    warning_levels: FrozenSet[str] = frozenset()

    @property
    def requires_level(self) -> bool:
        return bool(self.accepted_levels)

    def to_policy(self) -> Policy:
        return Policy(policy_name=self.name, policy_description=self.description, policy_url=self.url)


ADES_POLICY = PolicyDefinition(
    name="POLv3",
    description=(
        "Policy for validating Electronic Signatures and Electronic Seals regardless of the legal type "
        "of the signature or seal (according to Regulation (EU) No 910/2014), i.e. the fact that the "
        "electronic signature or electronic seal is either Advanced electronic Signature (AdES), AdES "
        "supported by a Qualified Certificate (AdES/QC) or a Qualified electronic Signature (QES) does "
        "not change the total validation result of the signature."
    ),
    url="http://open-eid.github.io/SiVa/siva3/appendix/validation_policy/#POLv3",
)

QES_POLICY = PolicyDefinition(
    name="POLv4",
    description=(
        "Policy according most common requirements of Estonian Public Administration, to validate "
        "Qualified Electronic Signatures and Electronic Seals with Qualified Certificates (according to "
        "Regulation (EU) No 910/2014). I.e. signatures that have been recognized as Advanced electronic "
        "Signatures (AdES) and AdES supported by a Qualified Certificate (AdES/QC) do not produce a "
        "positive validation result."
    ),
    url="http://open-eid.github.io/SiVa/siva3/appendix/validation_policy/#POLv4",
    accepted_levels=frozenset({"QESIG", "QESEAL", "QES", "ADESEAL_QC"}),
    warning_levels=frozenset({"ADESIG_QC"}),
)

PREDEFINED_POLICIES: Dict[str, PolicyDefinition] = {p.name: p for p in (ADES_POLICY, QES_POLICY)}


def resolve_policy(
    identifier: Optional[str],
    policies: Optional[Mapping[str, PolicyDefinition]] = None,
    default: Optional[str] = None,
) -> PolicyDefinition:
    """Найти политику по имени; пустое имя даёт политику по умолчанию."""
    if policies is None:
        policies = PREDEFINED_POLICIES
    if default is None:
        default = QES_POLICY.name
    name = (identifier or "").strip() or default
    try:
        return policies[name]
    except KeyError:
        logger.warning("Unknown validation policy requested: %r", identifier)
        raise InvalidPolicyError(identifier or name) from None
