"""Exceptions raised by the tokenizer."""


class ConfigurationError(ValueError):
    """A special case or tokenizer option is malformed.

    Raised at registration time, never later during tokenization.
    """


class MatcherContractError(RuntimeError):
    """An injected matcher returned a match that breaks its contract.

    Examples are matches whose end lies before their start, offsets outside
    the searched string, or overlapping infix matches.
    """
