"""
突變算子 (Mutation Operators)

負責就地擾動單一染色體以引入隨機性。突變應保持稀少以免演算法退化為隨機漫步；
突變機率由呼叫端（Evolver）控制，算子本身每次呼叫都會執行突變。
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from .exceptions import InvalidConfigurationError
from .models import Chromosome
from .random_source import RandomSource


RANDOM_RESETTING_MUTATION = "RandomResettingMutation"
SWAP_MUTATION = "SwapMutation"
SCRAMBLE_MUTATION = "ScrambleMutation"
INVERSION_MUTATION = "InversionMutation"


class Mutator(Protocol):
    """突變策略協定"""

    def mutate(self, rng: RandomSource, chromosome: Chromosome) -> None:
        ...


def _require_two_genes(strategy: str, chromosome: Chromosome) -> int:
    size = len(chromosome.genes)
    if size < 2:
        raise InvalidConfigurationError(
            f"{strategy} requires at least 2 genes, got {size}"
        )
    return size


def _pick_segment(rng: RandomSource, size: int) -> Tuple[int, int]:
    """選出起點 l 與偏移 d，保證 l < l + d < size"""
    lower = rng.int31n(size - 1)
    offset = rng.int31n(size - lower - 1) + 1
    return lower, offset


@dataclass(frozen=True)
class RandomResettingMutation:
    """隨機重設突變 (Random Resetting Mutation)

    隨機挑選一個基因並重設為 [0, max_allele) 中的值（不含 max_allele 本身）。
    當每個基因位元寬度為 1 時等同位元翻轉突變。最適合基因彼此獨立的染色體，
    不適用於排列型問題。

    Attributes:
        frequency: 若設定，先抽一個浮點數，超過此頻率時不做任何改變
    """
    frequency: Optional[float] = None

    def mutate(self, rng: RandomSource, chromosome: Chromosome) -> None:
        if self.frequency is not None and rng.float32() > self.frequency:
            return

        max_allele = chromosome.species.max_allele
        if max_allele < 1:
            raise InvalidConfigurationError(
                f"{RANDOM_RESETTING_MUTATION} requires max allele >= 1, got {max_allele}"
            )
        n = rng.int31n(len(chromosome.genes))
        chromosome.genes[n] = rng.int31n(max_allele)

    def __str__(self) -> str:
        return RANDOM_RESETTING_MUTATION


@dataclass(frozen=True)
class SwapMutation:
    """交換突變 (Swap Mutation)

    交換兩個基因的值，最適合排列型染色體。
    以起點加上正偏移決定第二個位置，因此兩個位置必定不同，不需要拒絕抽樣。
    """

    def mutate(self, rng: RandomSource, chromosome: Chromosome) -> None:
        size = _require_two_genes(SWAP_MUTATION, chromosome)
        i0, d = _pick_segment(rng, size)
        i1 = i0 + d
        genes = chromosome.genes
        genes[i0], genes[i1] = genes[i1], genes[i0]

    def __str__(self) -> str:
        return SWAP_MUTATION


@dataclass(frozen=True)
class ScrambleMutation:
    """打亂突變 (Scramble Mutation)

    選出區段 [l, l + d] 並就地打亂其中的基因，最適合排列型染色體。
    """

    def mutate(self, rng: RandomSource, chromosome: Chromosome) -> None:
        size = _require_two_genes(SCRAMBLE_MUTATION, chromosome)
        lower, offset = _pick_segment(rng, size)
        genes = chromosome.genes
        for i in range(lower, lower + offset):
            j = lower + rng.int31n(offset + 1)
            genes[i], genes[j] = genes[j], genes[i]

    def __str__(self) -> str:
        return SCRAMBLE_MUTATION


@dataclass(frozen=True)
class InversionMutation:
    """反轉突變 (Inversion Mutation)

    選出區段 [l, l + d] 並就地反轉其中的基因順序，最適合排列型染色體。
    """

    def mutate(self, rng: RandomSource, chromosome: Chromosome) -> None:
        size = _require_two_genes(INVERSION_MUTATION, chromosome)
        lower, offset = _pick_segment(rng, size)
        upper = lower + offset
        genes = chromosome.genes
        genes[lower:upper + 1] = genes[lower:upper + 1][::-1]

    def __str__(self) -> str:
        return INVERSION_MUTATION
