"""
Genetics Engine Exception Classes

This module defines custom exceptions for the evolutionary engine.
These exceptions provide clear error messages and handling guidance for the
error conditions that may occur while building species, strategies and
evolvers, or while drawing from a random source.
"""

from typing import Optional


class GeneticsError(Exception):
    """Base exception class for all genetics-related errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.suggestion:
            return f"{self.message}. Suggestion: {self.suggestion}"
        return self.message


# =============================================================================
# Invalid Configuration Errors
# =============================================================================

class InvalidConfigurationError(GeneticsError):
    """
    Raised when a species, strategy or evolver is configured in a way that
    can never succeed. These errors are not retryable.
    """


class PermutationRangeError(InvalidConfigurationError):
    """
    Raised when a permutation genome is requested from a species whose
    allele range cannot hold num_genes distinct values.
    """

    def __init__(self, num_genes: int, max_allele: int):
        self.num_genes = num_genes
        self.max_allele = max_allele
        message = (
            f"Cannot generate a permutation of {num_genes} genes "
            f"with max allele {max_allele}"
        )
        suggestion = f"Use a species with max_allele >= {num_genes - 1}"
        super().__init__(message, suggestion)


class EncodingWidthError(InvalidConfigurationError):
    """
    Raised when a species' packed encoding does not fit the integer width.
    """

    def __init__(self, num_genes: int, bits_per_gene: int, width: int):
        self.num_genes = num_genes
        self.bits_per_gene = bits_per_gene
        self.width = width
        message = (
            f"Cannot pack {num_genes} genes of {bits_per_gene} bits "
            f"into a {width}-bit integer"
        )
        max_genes = width // bits_per_gene if bits_per_gene else num_genes
        suggestion = f"Use at most {max_genes} genes for this allele range"
        super().__init__(message, suggestion)


class ReplacementCountError(InvalidConfigurationError):
    """
    Raised when the number of individuals replaced per generation is odd,
    not positive, or larger than the population.
    """

    def __init__(self, replacement_count: int, population_size: Optional[int] = None):
        self.replacement_count = replacement_count
        self.population_size = population_size
        if population_size is not None and replacement_count > population_size:
            message = (
                f"Replacement count {replacement_count} exceeds "
                f"population size {population_size}"
            )
            suggestion = "Lower the replacement count or grow the population"
        else:
            message = f"Invalid replacement count: {replacement_count}"
            suggestion = "Replacement count must be a positive even number; round odd counts up"
        super().__init__(message, suggestion)


class StrategyParameterError(InvalidConfigurationError):
    """
    Raised when a strategy parameter (tournament size, crossover points)
    is outside its valid domain.
    """

    def __init__(self, strategy: str, parameter: str, value: int, minimum: int):
        self.strategy = strategy
        self.parameter = parameter
        self.value = value
        self.minimum = minimum
        message = f"Invalid {parameter} for {strategy}: {value}"
        suggestion = f"{parameter} must be at least {minimum}"
        super().__init__(message, suggestion)


class InvalidMutationRateError(InvalidConfigurationError):
    """
    Raised when mutation_rate is outside the valid range [0.0, 1.0].
    """

    MIN_RATE = 0.0
    MAX_RATE = 1.0

    def __init__(self, mutation_rate: float):
        self.mutation_rate = mutation_rate
        message = f"Invalid mutation rate: {mutation_rate}"
        suggestion = f"Mutation rate must be between {self.MIN_RATE} and {self.MAX_RATE}"
        super().__init__(message, suggestion)


# =============================================================================
# Runtime Errors
# =============================================================================

class RandomSourceExhaustedError(GeneticsError):
    """
    Raised when a random source supplies fewer values than an operation
    requires.
    """

    def __init__(self, requested: int, received: int, what: str = "bytes"):
        self.requested = requested
        self.received = received
        self.what = what
        message = f"Random source exhausted: wanted {requested} {what}; got {received}"
        super().__init__(message)


# =============================================================================
# Parse Errors
# =============================================================================

class StrategyParseError(GeneticsError):
    """
    Raised when a strategy configuration string cannot be parsed into a
    selection, crossover or mutation strategy.
    """

    def __init__(self, kind: str, text: str, reason: str):
        self.kind = kind
        self.text = text
        self.reason = reason
        message = f"{kind} strategy {text!r}: {reason}"
        super().__init__(message)


# =============================================================================
# Utility Functions
# =============================================================================

def validate_mutation_rate(rate: float) -> None:
    """Validate mutation rate is within allowed range."""
    if rate < InvalidMutationRateError.MIN_RATE or rate > InvalidMutationRateError.MAX_RATE:
        raise InvalidMutationRateError(rate)


def validate_replacement_count(count: int, population_size: Optional[int] = None) -> None:
    """Validate replacement count is positive, even and fits the population."""
    if count < 2 or count % 2 != 0:
        raise ReplacementCountError(count)
    if population_size is not None and count > population_size:
        raise ReplacementCountError(count, population_size)


def validate_strategy_parameter(strategy: str, parameter: str, value: int, minimum: int) -> None:
    """Validate that a strategy's sized parameter is at least ``minimum``."""
    if value < minimum:
        raise StrategyParameterError(strategy, parameter, value, minimum)
