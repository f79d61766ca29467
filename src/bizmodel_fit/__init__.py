"""BizModelAI backend.

Ranks online business models against a user's quiz answers, explains the fit
with an optional LLM, and tracks paid quiz retakes.
"""

__version__ = "0.1.0"
