"""
HoldemTutor Agents

The abstract agent interface, the Teacher's heuristic engine and baseline
agents used to drive simulated hands.
"""

from holdemtutor.agents.base import BaseAgent, Decision
from holdemtutor.agents.random_agent import CallAgent, RandomAgent
from holdemtutor.agents.teacher import TeacherAgent

__all__ = ["BaseAgent", "Decision", "TeacherAgent", "RandomAgent", "CallAgent"]
