# src/agents/errors.py

class AgentInputError(ValueError):
    """A request is missing data the agent cannot work without (e.g. empty diary text)."""
    pass


class InvalidAgentResponseError(ValueError):
    """The model returned JSON, but not in the shape the agent asked for."""
    pass
