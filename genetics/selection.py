"""
選擇算子 (Selection Operators)

負責依據適應度向量選出親代索引。提供隨機普遍抽樣、排名選擇與競賽選擇三種策略，
所有策略都只透過傳入的隨機來源取得隨機性。
"""

from dataclasses import dataclass
from typing import List, Protocol, Sequence

from .exceptions import InvalidConfigurationError, validate_strategy_parameter
from .models import Fitness
from .random_source import RandomSource


STOCHASTIC_UNIVERSAL_SAMPLING = "StochasticUniversalSampling"
RANKED_SELECTION = "RankedSelection"
TOURNAMENT_SELECTION = "TournamentSelection"


class NaturalSelection(Protocol):
    """選擇策略協定

    回傳 num_parents 個指向適應度向量的索引，索引可重複。
    """

    def select_parents(
        self,
        rng: RandomSource,
        num_parents: int,
        fitness: Sequence[Fitness],
    ) -> List[int]:
        ...


def _check_inputs(num_parents: int, fitness: Sequence[Fitness]) -> None:
    if not fitness:
        raise ValueError("Fitness list cannot be empty")
    if num_parents < 1:
        raise ValueError(f"Number of parents must be at least 1, got {num_parents}")


def _spin_wheel(
    weights: Sequence[int],
    num_parents: int,
    distance: int,
    pos: int,
) -> List[int]:
    """沿輪盤走訪權重，回傳每個指標落點所在的位置

    指標從 pos 開始，每次前進 distance；同一位置的權重跨越多個指標時會被重複選中。
    總權重無法被 num_parents 整除時，最後一段弧內多餘的指標不計入。
    """
    positions: List[int] = []
    accum = 0
    n = 0
    while len(positions) < num_parents:
        accum += weights[n]
        while pos < accum and len(positions) < num_parents:
            positions.append(n)
            pos += distance
        n += 1
    return positions


@dataclass(frozen=True)
class StochasticUniversalSampling:
    """隨機普遍抽樣 (Stochastic Universal Sampling)

    建立一個輪盤，每個個體依適應度比例佔據一段弧長，再以 num_parents 個
    等距指標一次轉動輪盤選出親代。

    使用整數運算而非浮點數：速度較快，但總適應度必須遠大於 num_parents，
    否則會產生粒度誤差。此偏差是已知特性。適應度必須為非負值。
    """

    def select_parents(
        self,
        rng: RandomSource,
        num_parents: int,
        fitness: Sequence[Fitness],
    ) -> List[int]:
        """選擇親代

        Args:
            rng: 隨機來源
            num_parents: 需要選擇的親代數量
            fitness: 適應度向量

        Returns:
            親代索引列表

        Raises:
            ValueError: 若適應度為空或 num_parents < 1
            InvalidConfigurationError: 若總適應度不足以切分為 num_parents 段
        """
        _check_inputs(num_parents, fitness)

        total = sum(fitness)
        distance = total // num_parents
        if distance < 1:
            raise InvalidConfigurationError(
                f"Total fitness {total} cannot be split into {num_parents} wheel arcs",
                "Use RankedSelection or TournamentSelection for small or negative fitness",
            )

        pos = rng.int63n(distance)
        return _spin_wheel(fitness, num_parents, distance, pos)

    def __str__(self) -> str:
        return STOCHASTIC_UNIVERSAL_SAMPLING


@dataclass(frozen=True)
class RankedSelection:
    """排名選擇 (Ranked Selection)

    與隨機普遍抽樣相同的輪盤機制，但權重取自適應度排名而非原始數值：
    最低適應度排名為 1，最高為 N。即使原始適應度差距懸殊，族群仍能持續收斂，
    並且支援負值適應度。
    """

    def select_parents(
        self,
        rng: RandomSource,
        num_parents: int,
        fitness: Sequence[Fitness],
    ) -> List[int]:
        """依排名比例選擇親代

        Args:
            rng: 隨機來源
            num_parents: 需要選擇的親代數量
            fitness: 適應度向量

        Returns:
            親代索引列表

        Raises:
            ValueError: 若適應度為空或 num_parents < 1
            InvalidConfigurationError: 若排名總和不足以切分為 num_parents 段
        """
        _check_inputs(num_parents, fitness)

        # 穩定的降冪排序：ranked[0] 為最高適應度
        size = len(fitness)
        ranked = sorted(range(size), key=lambda i: fitness[i], reverse=True)
        weights = [size - n for n in range(size)]

        total_rank = size * (size + 1) // 2
        distance = total_rank // num_parents
        if distance < 1:
            raise InvalidConfigurationError(
                f"Total rank {total_rank} cannot be split into {num_parents} wheel arcs",
                "Select fewer parents than the population's triangular number",
            )

        pos = rng.int31n(distance)
        return [ranked[n] for n in _spin_wheel(weights, num_parents, distance, pos)]

    def __str__(self) -> str:
        return RANKED_SELECTION


@dataclass(frozen=True)
class TournamentSelection:
    """競賽選擇 (Tournament Selection)

    每個親代獨立地從族群中不重複抽出 size 個參賽者，取適應度最高者。
    平手時偏好抽出順序較後者。

    Attributes:
        size: 每場競賽的參賽者數量
    """
    size: int

    def __post_init__(self):
        validate_strategy_parameter(TOURNAMENT_SELECTION, "size", self.size, 1)

    def select_one_parent(self, rng: RandomSource, fitness: Sequence[Fitness]) -> int:
        """執行一場競賽並回傳勝出者索引"""
        candidates = rng.deal(len(fitness), self.size)
        winner = candidates[0]
        best = fitness[winner]
        for candidate in candidates[1:]:
            if fitness[candidate] >= best:
                best = fitness[candidate]
                winner = candidate
        return winner

    def select_parents(
        self,
        rng: RandomSource,
        num_parents: int,
        fitness: Sequence[Fitness],
    ) -> List[int]:
        """以 num_parents 場競賽選出親代

        Raises:
            ValueError: 若適應度為空或 num_parents < 1
            InvalidConfigurationError: 若競賽大小超過族群大小
        """
        _check_inputs(num_parents, fitness)
        if self.size > len(fitness):
            raise InvalidConfigurationError(
                f"Tournament size {self.size} exceeds population size {len(fitness)}"
            )
        return [self.select_one_parent(rng, fitness) for _ in range(num_parents)]

    def __str__(self) -> str:
        return f"{TOURNAMENT_SELECTION}({self.size})"
