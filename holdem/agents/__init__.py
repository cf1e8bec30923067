"""
holdem agents - decision providers for seated players.

The table asks a player's agent for every decision; the engine itself never
prompts or decides.
"""

from holdem.agents.base import BaseAgent
from holdem.agents.scripted import ScriptedAgent

__all__ = ["BaseAgent", "ScriptedAgent"]
