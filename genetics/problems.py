"""
範例問題 (Example Problems)

提供背包問題與旅行推銷員問題的適應度函數，供示範程式與啟發式測試使用。
演化核心本身不依賴此模組。
"""

from dataclasses import dataclass
from typing import List

from .models import Chromosome, Fitness, Species
from .random_source import RandomSource


@dataclass
class KnapsackProblem:
    """背包問題

    以二元基因組表示：gene[i] 非零且仍有剩餘承重時放入第 i 件物品。

    Attributes:
        max_weight: 背包承重上限
        weights: 各物品重量
        values: 各物品價值
    """
    max_weight: int
    weights: List[int]
    values: List[int]

    def __post_init__(self):
        if len(self.weights) != len(self.values):
            raise ValueError(
                f"Expected as many weights as values, got {len(self.weights)} and {len(self.values)}"
            )

    @property
    def num_items(self) -> int:
        return len(self.weights)

    def species(self) -> Species:
        """此問題的二元物種"""
        return Species(self.num_items, 1)

    def score(self, chromosome: Chromosome) -> Fitness:
        """計算放入物品的總價值"""
        value = 0
        weight = 0
        for gene, item_weight, item_value in zip(chromosome.genes, self.weights, self.values):
            if gene == 0 or weight + item_weight > self.max_weight:
                continue
            weight += item_weight
            value += item_value
        return value

    @classmethod
    def random(
        cls,
        rng: RandomSource,
        num_items: int = 50,
        max_weight: int = 5000,
    ) -> "KnapsackProblem":
        """建立隨機背包問題，物品重量與價值介於 [0, max_weight * 10 / num_items)

        Raises:
            ValueError: 若 num_items < 1 或物品數量多到取值範圍為空
        """
        if num_items < 1:
            raise ValueError(f"Knapsack needs at least one item, got {num_items}")
        bound = max_weight * 10 // num_items
        if bound < 1:
            raise ValueError(
                f"Cannot draw weights for {num_items} items under max weight {max_weight}: "
                f"item range [0, {max_weight} * 10 / {num_items}) is empty"
            )
        weights = []
        values = []
        for _ in range(num_items):
            weights.append(rng.int31n(bound))
            values.append(rng.int31n(bound))
        return cls(max_weight=max_weight, weights=weights, values=values)


@dataclass
class TravellingSalespersonProblem:
    """旅行推銷員問題

    距離以下三角對稱矩陣儲存：weights[i][j] 為城市 i 與 j (j < i) 的距離。
    沒有已知的最大路徑長度，因此適應度為路徑長度的負值，
    需要搭配支援負值的選擇策略（排名選擇或競賽選擇）。

    Attributes:
        weights: 下三角距離矩陣
    """
    weights: List[List[int]]

    @property
    def num_cities(self) -> int:
        return len(self.weights)

    def species(self) -> Species:
        """此問題的排列物種"""
        return Species(self.num_cities, self.num_cities - 1)

    def distance(self, a: int, b: int) -> int:
        if a < b:
            a, b = b, a
        return self.weights[a][b] if a != b else 0

    def score(self, chromosome: Chromosome) -> Fitness:
        """計算路徑長度的負值"""
        genes = chromosome.genes
        return -sum(self.distance(genes[i - 1], genes[i]) for i in range(1, len(genes)))

    @classmethod
    def random(
        cls,
        rng: RandomSource,
        num_cities: int = 50,
        max_distance: int = 100,
    ) -> "TravellingSalespersonProblem":
        """建立隨機城市距離"""
        weights = [
            [rng.int31n(max_distance) for _ in range(i)]
            for i in range(num_cities)
        ]
        return cls(weights=weights)
