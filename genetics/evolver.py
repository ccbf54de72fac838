"""
演化器 (Evolver)

整合選擇、交叉與突變策略，執行一次世代替換：選出親代、配對交叉、
依機率突變，最後以子代取代族群中適應度最低的個體。
"""

import heapq
import logging
from dataclasses import dataclass
from typing import List, MutableSequence, Sequence

from .crossover import Crossover
from .exceptions import (
    ReplacementCountError,
    validate_mutation_rate,
    validate_replacement_count,
)
from .models import Chromosome, Fitness
from .mutation import Mutator
from .random_source import RandomSource
from .selection import NaturalSelection


logger = logging.getLogger(__name__)


def k_min_indexes(fitness: Sequence[Fitness], k: int) -> List[int]:
    """找出適應度最低的 k 個索引

    以容量為 k 的最大堆積，時間複雜度 O(n log k)。堆積先以前 k 個原始索引
    播種，之後每個嚴格小於堆頂的個體取代堆頂；
    較晚出現的相同適應度永遠不會逐出已保留的項目。
    堆頂在相同適應度中取索引最小者，因此 k > 1 時被逐出的可能是較早的索引。

    Args:
        fitness: 適應度向量
        k: 要選出的數量

    Returns:
        k 個不重複的索引，順序為堆積內部順序

    Raises:
        ReplacementCountError: 若 k 大於族群大小
    """
    if k < 0 or k > len(fitness):
        raise ReplacementCountError(k, len(fitness))
    if k == 0:
        return []

    # heapq 為最小堆積，取負值使堆頂為目前保留的最大適應度
    heap = [(-fitness[i], i) for i in range(k)]
    heapq.heapify(heap)

    for i in range(k, len(fitness)):
        if fitness[i] < -heap[0][0]:
            heapq.heapreplace(heap, (-fitness[i], i))

    return [index for _, index in heap]


@dataclass
class Evolver:
    """演化器

    以一組可替換的策略執行世代替換。

    Attributes:
        replacement_count: 每世代被取代的個體數量（正偶數）
        mutation_rate: 每個子代的突變機率 [0, 1]
        selection: 選擇策略
        crossover: 交叉策略
        mutator: 突變策略
    """
    replacement_count: int
    mutation_rate: float
    selection: NaturalSelection
    crossover: Crossover
    mutator: Mutator

    def __post_init__(self):
        validate_replacement_count(self.replacement_count)
        validate_mutation_rate(self.mutation_rate)

    def _maybe_mutate(self, rng: RandomSource, child: Chromosome) -> bool:
        if rng.float32() < self.mutation_rate:
            self.mutator.mutate(rng, child)
            return True
        return False

    def evolve(
        self,
        rng: RandomSource,
        population: MutableSequence[Chromosome],
        fitness: Sequence[Fitness],
    ) -> List[int]:
        """執行一次世代替換

        Args:
            rng: 隨機來源
            population: 族群，將被就地修改
            fitness: 與族群逐一對應的適應度向量

        Returns:
            被子代取代的族群索引

        Raises:
            ValueError: 若族群與適應度長度不一致
            ReplacementCountError: 若取代數量超過族群大小
        """
        if len(population) != len(fitness):
            raise ValueError(
                f"Population size {len(population)} does not match "
                f"fitness size {len(fitness)}"
            )
        if self.replacement_count > len(population):
            raise ReplacementCountError(self.replacement_count, len(population))

        # 1. 選擇親代並打亂配對順序
        indexes = self.selection.select_parents(rng, self.replacement_count, fitness)
        rng.shuffle(indexes)

        # 2. 兩兩交叉，並依機率突變每個子代
        children: List[Chromosome] = []
        mutations = 0
        for i in range(0, self.replacement_count, 2):
            x, y = self.crossover.crossover(
                rng, population[indexes[i]], population[indexes[i + 1]]
            )
            mutations += self._maybe_mutate(rng, x)
            mutations += self._maybe_mutate(rng, y)
            children.extend((x, y))

        # 3. 取代最差的個體
        replaced = k_min_indexes(fitness, self.replacement_count)
        for child, slot in zip(children, replaced):
            population[slot] = child

        logger.debug(
            f"Replaced {len(replaced)} of {len(population)} individuals "
            f"({mutations} mutated) using {self.selection}/{self.crossover}/{self.mutator}"
        )
        return replaced
