"""
Mouth poses for the articulation visualization.

Each supported phoneme maps to a pose of the tongue, lips and teeth that the
3D model (or its 2D fallback) renders. Symbols without a dedicated pose use
the neutral resting pose. ``ArticulationState`` tracks what a single view is
currently showing.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from fluentform_pyutils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class TonguePose:
    """Tongue placement in model space.

    Attributes:
        position: Center of the tongue.
        rotation: Euler rotation in radians.
        scale: Per-axis scale of the tongue mesh.
    """

    position: Vector3
    rotation: Vector3 = field(default_factory=Vector3)
    scale: Vector3 = field(default_factory=lambda: Vector3(1.5, 0.5, 1.0))


@dataclass(frozen=True)
class MouthPose:
    """Full mouth configuration for one sound.

    Attributes:
        tongue: Tongue placement.
        lips_aperture: How open the lips are, 0 closed to 1 fully open.
        lips_width: Horizontal lip scale, below 1 for rounded lips.
        teeth_gap: Distance between upper and lower teeth.
    """

    tongue: TonguePose
    lips_aperture: float = 1.0
    lips_width: float = 1.0
    teeth_gap: float = 0.5


def _pose(
    *,
    tongue: TonguePose,
    lips_aperture: float,
    teeth_gap: float | None = None,
    lips_width: float = 1.0,
) -> MouthPose:
    """Build a pose; opening the lips moves the teeth apart by the same amount unless set."""
    return MouthPose(
        tongue=tongue,
        lips_aperture=lips_aperture,
        lips_width=lips_width,
        teeth_gap=lips_aperture if teeth_gap is None else teeth_gap,
    )


NEUTRAL_POSE: Final[MouthPose] = MouthPose(
    tongue=TonguePose(position=Vector3(0.0, -0.9, 0.5)),
    lips_aperture=1.0,
    lips_width=1.0,
    teeth_gap=0.5,
)

_BACK_OF_TONGUE_RAISED: Final[MouthPose] = _pose(
    tongue=TonguePose(
        position=Vector3(0.0, 0.2, -0.5),
        rotation=Vector3(-math.pi / 8, 0.0, 0.0),
        scale=Vector3(1.5, 0.6, 1.2),
    ),
    lips_aperture=0.6,
)

ARTICULATION_POSES: Final[MappingProxyType[str, MouthPose]] = MappingProxyType(
    {
        # tongue curled back
        "r": _pose(
            tongue=TonguePose(
                position=Vector3(0.0, -0.4, 1.2),
                rotation=Vector3(-math.pi / 6, 0.0, 0.0),
                scale=Vector3(1.2, 0.6, 1.5),
            ),
            lips_aperture=0.7,
        ),
        # tongue between the teeth
        "th": _pose(
            tongue=TonguePose(position=Vector3(0.0, 0.0, 1.8), scale=Vector3(1.5, 0.3, 1.2)),
            lips_aperture=0.5,
            teeth_gap=0.3,
        ),
        # tongue behind the teeth, narrow channel
        "s": _pose(
            tongue=TonguePose(position=Vector3(0.0, 0.1, 1.0), scale=Vector3(1.5, 0.2, 2.0)),
            lips_aperture=0.4,
            teeth_gap=0.2,
        ),
        "sh": _pose(
            tongue=TonguePose(
                position=Vector3(0.0, 0.3, 0.5),
                rotation=Vector3(math.pi / 12, 0.0, 0.0),
                scale=Vector3(1.5, 0.4, 1.5),
            ),
            lips_aperture=0.3,
            lips_width=0.9,
        ),
        # tongue tip on the ridge behind the upper teeth
        "l": _pose(
            tongue=TonguePose(
                position=Vector3(0.0, 0.5, 1.5),
                rotation=Vector3(math.pi / 8, 0.0, 0.0),
                scale=Vector3(1.5, 0.3, 1.8),
            ),
            lips_aperture=0.6,
        ),
        "k": _BACK_OF_TONGUE_RAISED,
        "g": _BACK_OF_TONGUE_RAISED,
    }
)


def pose_for_phoneme(symbol: str) -> MouthPose:
    """Mouth pose for a phoneme symbol, case-insensitively; neutral for vowels and the rest."""
    return ARTICULATION_POSES.get(symbol.lower(), NEUTRAL_POSE)


class ArticulationState:
    """Pose and caption currently shown by one articulation view."""

    def __init__(self) -> None:
        self.pose: MouthPose = NEUTRAL_POSE
        self.label: str | None = None

    def show(self, symbol: str) -> MouthPose:
        """Switch the view to the pose for ``symbol`` and caption it with the symbol.

        Args:
            symbol: Phoneme symbol selected by the user.

        Returns:
            The pose now shown.
        """
        self.reset()
        self.pose = pose_for_phoneme(symbol)
        self.label = symbol.upper()
        logger.debug(f"Showing articulation for '{symbol}'")
        return self.pose

    def reset(self) -> None:
        """Return to the neutral resting pose with no caption."""
        self.pose = NEUTRAL_POSE
        self.label = None

    @property
    def is_neutral(self) -> bool:
        return self.pose == NEUTRAL_POSE
