"""
Configuration module.
"""

from .sca_config import SCAConfig, InvalidConfig, NeighborMode, load_config, save_config

__all__ = [
    'SCAConfig',
    'InvalidConfig',
    'NeighborMode',
    'load_config',
    'save_config'
]
