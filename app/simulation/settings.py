"""
simulation/settings.py

Numerical and display settings for net building and solving.

Settings are passed explicitly into every function that needs them; there
is no module-level mutable state. A settings file is plain JSON.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverSettings:
    """Tunable constants for clustering, impedance models and the linear solver.

    The DC capacitor/inductor impedances are stand-ins for an ideal open
    (infinite) and an ideal short (zero). The pivot threshold is tuned
    against these magnitudes, so change them together.
    """

    # Clustering: tolerance = max(tolerance_floor, floor(grid * tolerance_grid_ratio))
    tolerance_floor: float = 6.0
    tolerance_grid_ratio: float = 0.35
    min_cell_size: float = 10.0

    # Impedance approximations at f = 0
    capacitor_dc_impedance: float = 1e18
    inductor_dc_impedance: float = 1e-12

    # Linear solver
    pivot_epsilon: float = 1e-14

    # Display
    display_digits: int = 6
    locale: str = "en"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SolverSettings":
        """Build settings from a dict, ignoring (and logging) unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown solver setting %r", key)
                continue
            kwargs[key] = value
        return cls(**kwargs)


DEFAULT_SETTINGS = SolverSettings()


def load_settings(path: Optional[Union[str, Path]]) -> SolverSettings:
    """Load settings from a JSON file; None returns the defaults.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not a JSON object.
    """
    if path is None:
        return DEFAULT_SETTINGS

    with open(Path(path), "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Settings file must contain a JSON object.")
    settings = SolverSettings.from_dict(data)
    logger.debug("Loaded solver settings from %s: %s", path, settings)
    return settings
