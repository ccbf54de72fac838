"""
遺傳演算法引擎 (Genetics Engine)

以可替換的選擇、交叉與突變策略演化固定形狀的基因組，優化呼叫端提供的適應度函數。
"""

__version__ = "0.1.0"

from .models import (
    ENCODING_WIDTH,
    Chromosome,
    Fitness,
    Gene,
    Species,
    same_species,
)

from .random_source import (
    NumpyRandomSource,
    RandomSource,
    ScriptedRandomSource,
)

from .selection import (
    NaturalSelection,
    RankedSelection,
    StochasticUniversalSampling,
    TournamentSelection,
)

from .crossover import (
    Crossover,
    DavisOrderCrossover,
    MultiPointCrossover,
    WholeArithmeticRecombination,
)

from .mutation import (
    InversionMutation,
    Mutator,
    RandomResettingMutation,
    ScrambleMutation,
    SwapMutation,
)

from .evolver import (
    Evolver,
    k_min_indexes,
)

from .generation import (
    EvolutionHistory,
    GenerationController,
    GenerationStats,
)

from .config import (
    EvolutionConfig,
    parse_crossover,
    parse_mutation,
    parse_selection,
)

from .problems import (
    KnapsackProblem,
    TravellingSalespersonProblem,
)

from .exceptions import (
    EncodingWidthError,
    GeneticsError,
    InvalidConfigurationError,
    InvalidMutationRateError,
    PermutationRangeError,
    RandomSourceExhaustedError,
    ReplacementCountError,
    StrategyParameterError,
    StrategyParseError,
)

__all__ = [
    # Models
    "ENCODING_WIDTH",
    "Chromosome",
    "Fitness",
    "Gene",
    "Species",
    "same_species",
    # Random sources
    "NumpyRandomSource",
    "RandomSource",
    "ScriptedRandomSource",
    # Selection
    "NaturalSelection",
    "RankedSelection",
    "StochasticUniversalSampling",
    "TournamentSelection",
    # Crossover
    "Crossover",
    "DavisOrderCrossover",
    "MultiPointCrossover",
    "WholeArithmeticRecombination",
    # Mutation
    "InversionMutation",
    "Mutator",
    "RandomResettingMutation",
    "ScrambleMutation",
    "SwapMutation",
    # Evolver
    "Evolver",
    "k_min_indexes",
    # Generation
    "EvolutionHistory",
    "GenerationController",
    "GenerationStats",
    # Config
    "EvolutionConfig",
    "parse_crossover",
    "parse_mutation",
    "parse_selection",
    # Problems
    "KnapsackProblem",
    "TravellingSalespersonProblem",
    # Exceptions
    "EncodingWidthError",
    "GeneticsError",
    "InvalidConfigurationError",
    "InvalidMutationRateError",
    "PermutationRangeError",
    "RandomSourceExhaustedError",
    "ReplacementCountError",
    "StrategyParameterError",
    "StrategyParseError",
]
