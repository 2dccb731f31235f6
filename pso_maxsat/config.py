from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from pso_maxsat.constants import TOPOLOGY_ALIASES

"""
Dataclass definition for PSO run settings.

All fields are optional (`None`) so that this file acts only as an override layer.
Defaults for a run (swarm size, iteration budget, topology) come from the
presets in `constants.py` and the command-line runners. The PSO coefficients
themselves are fixed and deliberately absent here.
"""


class ConfigurationError(ValueError):
    """Raised for unsupported or incomplete run settings."""


@dataclass(frozen=True)
class PSOParams:
    swarm_size: Optional[int] = None
    iters: Optional[int] = None
    topology: Optional[str] = None
    seed: Optional[int] = None
    legacy_pbest: Optional[bool] = None
    log_every: Optional[int] = None


REQUIRED_FIELDS = ("swarm_size", "iters", "topology")


def canonical_topology(name: str) -> str:
    """Map a topology name or short code onto its canonical spelling."""
    if not isinstance(name, str):
        raise ConfigurationError(f"Topology name must be a string, got {name!r}")
    key = name.strip().lower()
    if key not in TOPOLOGY_ALIASES:
        known = ", ".join(sorted(TOPOLOGY_ALIASES))
        raise ConfigurationError(f"Unknown topology: {name!r} (expected one of: {known})")
    return TOPOLOGY_ALIASES[key]


def require_params(p: PSOParams) -> PSOParams:
    """Validate a fully-specified parameter set and return it with the topology normalized."""
    missing = [k for k, v in vars(p).items() if k in REQUIRED_FIELDS and v is None]
    if missing:
        raise ConfigurationError(f"PSOParams missing required fields: {missing}")
    if not isinstance(p.swarm_size, int) or p.swarm_size <= 0:
        raise ConfigurationError("swarm_size must be a positive int.")
    if not isinstance(p.iters, int) or p.iters < 0:
        raise ConfigurationError("iters must be a non-negative int.")
    if p.log_every is not None and (not isinstance(p.log_every, int) or p.log_every < 0):
        raise ConfigurationError("log_every must be a non-negative int.")

    d = {**p.__dict__}
    d["topology"] = canonical_topology(p.topology)
    return PSOParams(**d)


def merge_params(base: PSOParams, **overrides) -> PSOParams:
    """Return `base` with every non-None override applied."""
    d = {**base.__dict__}
    for k, v in overrides.items():
        if k not in d:
            raise ConfigurationError(f"Unknown PSOParams field: {k}")
        if v is not None:
            d[k] = v
    return PSOParams(**d)
