"""
Exception types raised at the grammar boundary.

- GrammarError for contract violations of a grammar or its alphabet.
- ProductionSyntaxError for production text that does not follow `L<d>->RHS`.
- ShapeError for productions whose left/right sides break the CNF shape rules.
- ConfigError for settings that cannot be applied.

The transformation stages never raise these on their own; they are raised
while building productions, so a grammar either enters the pipeline valid or
not at all.
"""

__all__ = [
    "GrammarError",
    "ProductionSyntaxError",
    "ShapeError",
    "ConfigError",
]


class GrammarError(ValueError):
    """Grammar contract violation (bad alphabet, no free helper symbol, ...)."""


class ProductionSyntaxError(GrammarError):
    """Production text is malformed."""


class ShapeError(GrammarError):
    """Production sides violate the symbol case or length rules."""


class ConfigError(ValueError):
    """Setting value is invalid."""
