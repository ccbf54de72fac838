"""
交叉算子 (Crossover Operators)

負責將兩個親代基因組重組為兩個子代。親代本身不會被修改。
"""

import math
from dataclasses import dataclass
from typing import List, Protocol, Tuple

from .exceptions import InvalidConfigurationError, validate_strategy_parameter
from .models import Chromosome, Gene, same_species
from .random_source import RandomSource


MULTI_POINT_CROSSOVER = "MultiPointCrossover"
WHOLE_ARITHMETIC_RECOMBINATION = "WholeArithmeticRecombination"
DAVIS_ORDER_CROSSOVER = "DavisOrderCrossover"


class Crossover(Protocol):
    """交叉策略協定"""

    def crossover(
        self,
        rng: RandomSource,
        a: Chromosome,
        b: Chromosome,
    ) -> Tuple[Chromosome, Chromosome]:
        ...


def round_half_away(value: float) -> int:
    """四捨五入，0.5 一律遠離零"""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class MultiPointCrossover:
    """多點交叉 (Multi-Point Crossover)

    選出 points 個切點，子代在每個切點交換來源親代。適用於數值型染色體。

    Attributes:
        points: 切點數量
    """
    points: int

    def __post_init__(self):
        validate_strategy_parameter(MULTI_POINT_CROSSOVER, "points", self.points, 1)

    def crossover(
        self,
        rng: RandomSource,
        a: Chromosome,
        b: Chromosome,
    ) -> Tuple[Chromosome, Chromosome]:
        """多點交叉

        從 A、B 的副本開始，於每個遞增排序後的切點交換兩者的剩餘尾段。

        Args:
            rng: 隨機來源
            a: 第一個親代
            b: 第二個親代

        Returns:
            兩個子代 (x, y)

        Raises:
            InvalidConfigurationError: 若切點數量超過基因數量
        """
        species = same_species([a, b])
        if self.points > species.num_genes:
            raise InvalidConfigurationError(
                f"Cannot place {self.points} crossover points in {species.num_genes} genes"
            )

        x = a.genes[:]
        y = b.genes[:]
        for n in sorted(rng.deal(species.num_genes, self.points)):
            x[n:], y[n:] = y[n:], x[n:]
        return Chromosome(species, x), Chromosome(species, y)

    def __str__(self) -> str:
        return f"{MULTI_POINT_CROSSOVER}({self.points})"


@dataclass(frozen=True)
class WholeArithmeticRecombination:
    """整體算術重組 (Whole Arithmetic Recombination)

    抽出權重 f ∈ [0, 1)，子代為兩親代的加權平均。適用於數值型染色體，
    族群會趨向平均值。
    """

    def crossover(
        self,
        rng: RandomSource,
        a: Chromosome,
        b: Chromosome,
    ) -> Tuple[Chromosome, Chromosome]:
        """整體算術重組

        x = round(f*a + (1-f)*b)，y = b - (x - a)。
        只做一次浮點運算並將整數差量鏡像套用，避免 0.5 被進位兩次。
        """
        species = same_species([a, b])
        f = rng.float64()

        x: List[Gene] = []
        y: List[Gene] = []
        for gene_a, gene_b in zip(a.genes, b.genes):
            gene_x = round_half_away(f * gene_a + (1 - f) * gene_b)
            x.append(gene_x)
            y.append(gene_b - (gene_x - gene_a))
        return Chromosome(species, x), Chromosome(species, y)

    def __str__(self) -> str:
        return WHOLE_ARITHMETIC_RECOMBINATION


@dataclass(frozen=True)
class DavisOrderCrossover:
    """Davis 順序交叉 (OX1)

    選出兩個切點將基因組分為三段：中段保留主要親代，其餘位置自上切點起
    循環填入次要親代中尚未出現的值。適用於排列型染色體（例如圖論問題）；
    當且僅當兩親代為同一值集合的排列時，子代仍為合法排列。
    """

    def crossover(
        self,
        rng: RandomSource,
        a: Chromosome,
        b: Chromosome,
    ) -> Tuple[Chromosome, Chromosome]:
        species = same_species([a, b])
        lower, upper = sorted(rng.deal(species.num_genes + 1, 2))
        return (
            self._crossover_one(a, b, lower, upper),
            self._crossover_one(b, a, lower, upper),
        )

    @staticmethod
    def _crossover_one(
        primary: Chromosome,
        secondary: Chromosome,
        lower: int,
        upper: int,
    ) -> Chromosome:
        species = primary.species
        child = species.new()
        seen = set()

        for i in range(lower, upper):
            seen.add(primary.genes[i])
            child.genes[i] = primary.genes[i]

        insert = upper % species.num_genes
        for gene in secondary.genes:
            if gene in seen:
                continue
            child.genes[insert] = gene
            insert = (insert + 1) % species.num_genes
        return child

    def __str__(self) -> str:
        return DAVIS_ORDER_CROSSOVER
