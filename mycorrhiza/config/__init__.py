"""Configuration package for the mycorrhiza simulation.

Constants are split by concern (growth, nutrients, session); the tunable
per-session values live on ``SimulationParameters``.
"""

from mycorrhiza.config.simulation_config import SimulationParameters

__all__ = ["SimulationParameters"]
