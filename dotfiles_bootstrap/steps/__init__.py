from .step_10_preflight import PreflightStep
from .step_20_ssh import SshStep
from .step_30_clone import CloneStep
from .step_40_brew import BrewStep
from .step_50_bundle import BundleStep
from .step_60_stow import StowStep
from .step_90_postflight import PostflightStep

__all__ = [
    "PreflightStep",
    "SshStep",
    "CloneStep",
    "BrewStep",
    "BundleStep",
    "StowStep",
    "PostflightStep",
]
