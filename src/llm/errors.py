# src/llm/errors.py

class GenerationError(Exception):
    """The text-generation service answered, but unusably (4xx, empty reply). Not retried."""
    pass


class TransientGenerationError(GenerationError):
    """Timeouts, transport failures, HTTP 429 and 5xx. Safe to retry."""
    pass


class GenerationConfigError(Exception):
    """The generation service is not configured (e.g. no API key). Never retried."""
    pass


class JSONExtractionError(ValueError):
    """No JSON object could be recovered from a model reply."""
    pass
