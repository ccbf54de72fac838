"""
世代控制器 (Generation Controller)

負責驅動演化迭代流程：每一世代以呼叫端提供的適應度函數評分族群，
記錄統計與目前最佳解，再呼叫 Evolver 產生下一代。
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, MutableSequence, Optional

from .evolver import Evolver
from .models import Chromosome, Fitness
from .random_source import RandomSource


logger = logging.getLogger(__name__)


FitnessFunction = Callable[[Chromosome], Fitness]


@dataclass
class GenerationStats:
    """世代統計

    記錄單一世代的統計資訊。

    Attributes:
        generation: 世代編號
        best_fitness: 最佳適應度
        average_fitness: 平均適應度
        worst_fitness: 最差適應度
    """
    generation: int
    best_fitness: Fitness
    average_fitness: float
    worst_fitness: Fitness


@dataclass
class EvolutionHistory:
    """演化歷史

    Attributes:
        generations: 各世代統計列表
        best: 整個過程中出現過的最佳染色體（副本）
        best_fitness: 最佳染色體的適應度
        samples: 每 sample_rate 個世代取樣一次的最佳適應度
        total_generations: 實際執行的世代數
        converged: 是否因收斂而提前結束
    """
    generations: List[GenerationStats]
    best: Chromosome
    best_fitness: Fitness
    samples: List[Fitness] = field(default_factory=list)
    total_generations: int = 0
    converged: bool = False


class GenerationController:
    """世代控制器

    Attributes:
        evolver: 世代替換使用的演化器
        max_generations: 最大世代數
        sample_rate: 最佳適應度的取樣間隔
        convergence_patience: 最佳適應度連續未改善多少世代後提前結束，None 表示不檢查
        progress_callback: 進度回調函數，接收 (generation, stats)
    """

    def __init__(
        self,
        evolver: Evolver,
        max_generations: int = 100,
        sample_rate: int = 10,
        convergence_patience: Optional[int] = None,
        progress_callback: Optional[Callable[[int, GenerationStats], None]] = None,
    ):
        """初始化世代控制器

        Raises:
            ValueError: 若 max_generations、sample_rate 或 convergence_patience 小於 1
        """
        if max_generations < 1:
            raise ValueError(
                f"Max generations must be at least 1, got {max_generations}"
            )
        if sample_rate < 1:
            raise ValueError(f"Sample rate must be at least 1, got {sample_rate}")
        if convergence_patience is not None and convergence_patience < 1:
            raise ValueError(
                f"Convergence patience must be at least 1, got {convergence_patience}"
            )

        self.evolver = evolver
        self.max_generations = max_generations
        self.sample_rate = sample_rate
        self.convergence_patience = convergence_patience
        self.progress_callback = progress_callback

    def run(
        self,
        rng: RandomSource,
        population: MutableSequence[Chromosome],
        fitness_fn: FitnessFunction,
    ) -> EvolutionHistory:
        """執行演化流程

        族群會被就地修改；最後一代評分後不再執行替換，因此回傳時族群與
        最後一筆統計一致。

        Args:
            rng: 隨機來源
            population: 初始族群
            fitness_fn: 適應度函數

        Returns:
            演化歷史記錄

        Raises:
            ValueError: 若初始族群為空
        """
        if not population:
            raise ValueError("Initial population cannot be empty")

        history: List[GenerationStats] = []
        samples: List[Fitness] = []
        best: Optional[Chromosome] = None
        best_fitness: Fitness = 0
        stale = 0
        converged = False

        for gen in range(self.max_generations):
            # 1. 評估適應度
            fitness = [fitness_fn(chromosome) for chromosome in population]

            # 2. 更新最佳解
            improved = False
            for chromosome, score in zip(population, fitness):
                if best is None or score > best_fitness:
                    best = chromosome.copy()
                    best_fitness = score
                    improved = True
            stale = 0 if improved else stale + 1

            # 3. 記錄統計
            stats = GenerationStats(
                generation=gen,
                best_fitness=max(fitness),
                average_fitness=sum(fitness) / len(fitness),
                worst_fitness=min(fitness),
            )
            history.append(stats)
            if (gen + 1) % self.sample_rate == 0:
                samples.append(best_fitness)

            if self.progress_callback is not None:
                self.progress_callback(gen, stats)
            logger.debug(
                f"Generation {gen}: best={stats.best_fitness} "
                f"average={stats.average_fitness:.2f} worst={stats.worst_fitness}"
            )

            # 4. 檢查收斂
            if self.convergence_patience is not None and stale >= self.convergence_patience:
                converged = True
                logger.info(
                    f"Converged after {gen + 1} generations: no improvement "
                    f"for {stale} generations"
                )
                break

            # 5. 若非最後一代，執行世代替換
            if gen < self.max_generations - 1:
                self.evolver.evolve(rng, population, fitness)

        logger.info(
            f"Evolution finished after {len(history)} generations with best fitness {best_fitness}"
        )
        return EvolutionHistory(
            generations=history,
            best=best,
            best_fitness=best_fitness,
            samples=samples,
            total_generations=len(history),
            converged=converged,
        )
