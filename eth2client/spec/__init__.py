"""Consensus spec types and presets used by the client.

Note: The 'types' module must be imported after calling constants.set_preset()
to ensure SSZ types have correct sizes for the chosen preset.
"""

from . import constants
from .forks import ConsensusVersion, FORKS

__all__ = ["constants", "ConsensusVersion", "FORKS"]
