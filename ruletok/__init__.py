__version__ = "1.0.0"

from .base import (
    BaseTokenizer,
)

from .errors import (
    ConfigurationError,
    MatcherContractError,
)

from .tokenizer import (
    Tokenizer,
)

from .tokens import (
    Token,
    detokenize,
)

from .whitespace import (
    WhitespaceTokenizer,
)

# Don't expose the following submodules.
del globals()["base"]
del globals()["tokenizer"]
del globals()["whitespace"]
