"""Advisory publish gates driven by an artifact's governance scores.

Gates never change what the validators report. They only suggest a
publication status from confidence, complexity and depth.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .models import (
    AliasDef,
    EntityDef,
    EnumDef,
    Governance,
    PropertyDef,
    PublicationStatus,
    RelationDef,
    ShapeDef,
)

Artifact = Union[EntityDef, PropertyDef, RelationDef, EnumDef, AliasDef, ShapeDef]


@dataclass(frozen=True)
class PublishGateConfig:
    """Thresholds for the publish and propose gates."""

    min_confidence_for_publish: float = 0.85
    max_complexity_for_publish: int = 5
    max_depth_for_publish: int = 4
    min_confidence_for_proposal: float = 0.5
    max_complexity_for_proposal: int = 9
    max_depth_for_proposal: int = 9


class GateDecision(str, Enum):
    REJECT = "reject"
    PROPOSE = "propose"
    PUBLISH = "publish"


def _passes(
    governance: Governance, min_confidence: float, max_complexity: int, max_depth: int
) -> bool:
    return (
        governance.confidence >= min_confidence
        and governance.complexity <= max_complexity
        and governance.depth <= max_depth
    )


def decide(
    scored: Union[Artifact, Governance], config: PublishGateConfig = PublishGateConfig()
) -> GateDecision:
    """Pick the strictest gate the scores clear.

    Args:
        scored: An artifact or its governance facet
        config: Gate thresholds

    Returns:
        PUBLISH, PROPOSE or REJECT
    """
    governance = scored if isinstance(scored, Governance) else scored.governance

    if _passes(
        governance,
        config.min_confidence_for_publish,
        config.max_complexity_for_publish,
        config.max_depth_for_publish,
    ):
        return GateDecision.PUBLISH
    if _passes(
        governance,
        config.min_confidence_for_proposal,
        config.max_complexity_for_proposal,
        config.max_depth_for_proposal,
    ):
        return GateDecision.PROPOSE
    return GateDecision.REJECT


def to_status(decision: GateDecision) -> PublicationStatus:
    if decision == GateDecision.PUBLISH:
        return PublicationStatus.PUBLISHED
    if decision == GateDecision.PROPOSE:
        return PublicationStatus.PROPOSED
    return PublicationStatus.REJECTED
