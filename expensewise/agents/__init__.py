"""AI Agents package."""

from expensewise.agents.ai_agents import CategorizationAgent
from expensewise.agents.prompts import build_categorization_prompt

__all__ = [
    "CategorizationAgent",
    "build_categorization_prompt",
]
