"""Minuta Drafter: legal document drafts, risk analysis and clause variations via LLM"""

__version__ = "0.1.0"
