"""
演化配置 (Evolution Configuration)

將策略名稱字串（例如 "TournamentSelection(3)"）解析為具體的策略物件，
並以 EvolutionConfig 集中管理一次演化所需的所有參數。
"""

import json
import logging
import re
from dataclasses import asdict, dataclass, fields
from typing import Any, Callable, Dict, Optional, Tuple

from .crossover import (
    DAVIS_ORDER_CROSSOVER,
    MULTI_POINT_CROSSOVER,
    WHOLE_ARITHMETIC_RECOMBINATION,
    Crossover,
    DavisOrderCrossover,
    MultiPointCrossover,
    WholeArithmeticRecombination,
)
from .evolver import Evolver
from .exceptions import (
    InvalidConfigurationError,
    StrategyParseError,
    validate_mutation_rate,
    validate_replacement_count,
)
from .generation import GenerationController
from .mutation import (
    INVERSION_MUTATION,
    RANDOM_RESETTING_MUTATION,
    SCRAMBLE_MUTATION,
    SWAP_MUTATION,
    InversionMutation,
    Mutator,
    RandomResettingMutation,
    ScrambleMutation,
    SwapMutation,
)
from .random_source import NumpyRandomSource
from .selection import (
    RANKED_SELECTION,
    STOCHASTIC_UNIVERSAL_SAMPLING,
    TOURNAMENT_SELECTION,
    NaturalSelection,
    RankedSelection,
    StochasticUniversalSampling,
    TournamentSelection,
)


logger = logging.getLogger(__name__)


STRATEGY_FORMAT = re.compile(r"^(\w+)(\((\w*)\))?$")

# 具參數策略的最小合法參數
MIN_SIZED_PARAMETER = 2


def _split(kind: str, text: str) -> Tuple[str, Optional[str]]:
    match = STRATEGY_FORMAT.match(text.strip())
    if match is None:
        raise StrategyParseError(kind, text, "expected Name or Name(parameter)")
    return match.group(1), match.group(3)


def _sized_parameter(kind: str, text: str, arg: Optional[str]) -> int:
    if not arg or not arg.isdecimal() or int(arg) < MIN_SIZED_PARAMETER:
        raise StrategyParseError(
            kind, text, f"parameter {arg!r} should be a whole number >= {MIN_SIZED_PARAMETER}"
        )
    return int(arg)


def _parse(
    kind: str,
    text: str,
    simple: Dict[str, Callable[[], Any]],
    sized: Dict[str, Callable[[int], Any]],
) -> Any:
    name, arg = _split(kind, text)
    if name in sized:
        return sized[name](_sized_parameter(kind, text, arg))
    if name in simple:
        if arg:
            raise StrategyParseError(kind, text, f"{name} does not accept parameters")
        return simple[name]()
    raise StrategyParseError(kind, text, f"unknown function name {name}")


def parse_selection(text: str) -> NaturalSelection:
    """解析選擇策略

    合法值：StochasticUniversalSampling、RankedSelection、TournamentSelection(n)。

    Raises:
        StrategyParseError: 若名稱未知、格式錯誤或參數不合法
    """
    return _parse(
        "Selection",
        text,
        simple={
            STOCHASTIC_UNIVERSAL_SAMPLING: StochasticUniversalSampling,
            RANKED_SELECTION: RankedSelection,
        },
        sized={TOURNAMENT_SELECTION: TournamentSelection},
    )


def parse_crossover(text: str) -> Crossover:
    """解析交叉策略

    合法值：MultiPointCrossover(n)、WholeArithmeticRecombination、DavisOrderCrossover。

    Raises:
        StrategyParseError: 若名稱未知、格式錯誤或參數不合法
    """
    return _parse(
        "Crossover",
        text,
        simple={
            WHOLE_ARITHMETIC_RECOMBINATION: WholeArithmeticRecombination,
            DAVIS_ORDER_CROSSOVER: DavisOrderCrossover,
        },
        sized={MULTI_POINT_CROSSOVER: MultiPointCrossover},
    )


def parse_mutation(text: str) -> Mutator:
    """解析突變策略

    合法值：RandomResettingMutation、SwapMutation、ScrambleMutation、InversionMutation。

    Raises:
        StrategyParseError: 若名稱未知、格式錯誤或帶有參數
    """
    return _parse(
        "Mutation",
        text,
        simple={
            RANDOM_RESETTING_MUTATION: RandomResettingMutation,
            SWAP_MUTATION: SwapMutation,
            SCRAMBLE_MUTATION: ScrambleMutation,
            INVERSION_MUTATION: InversionMutation,
        },
        sized={},
    )


def _resolve_selection(text: Optional[str]) -> NaturalSelection:
    return StochasticUniversalSampling() if text is None else parse_selection(text)


def _resolve_crossover(text: Optional[str]) -> Crossover:
    # 預設的單點交叉不經過解析，因為解析器要求參數 >= 2
    return MultiPointCrossover(1) if text is None else parse_crossover(text)


def _resolve_mutation(text: Optional[str]) -> Mutator:
    return ScrambleMutation() if text is None else parse_mutation(text)


def round_up_even(count: int) -> int:
    """將數量向上取整為偶數"""
    return count + count % 2


@dataclass
class EvolutionConfig:
    """演化配置

    控制演化引擎的所有可配置參數。策略欄位為 None 時使用預設策略。

    Attributes:
        population_size: 族群大小
        replacement_count: 每世代取代數量，None 表示族群的一半（向上取偶數）
        mutation_rate: 子代突變機率
        selection: 選擇策略字串
        crossover: 交叉策略字串
        mutation: 突變策略字串
        max_generations: 最大世代數
        sample_rate: 最佳適應度取樣間隔
        convergence_patience: 收斂耐心值，None 表示不提前結束
        seed: 預設隨機來源的種子
    """
    population_size: int = 50
    replacement_count: Optional[int] = None
    mutation_rate: float = 0.03
    selection: Optional[str] = None
    crossover: Optional[str] = None
    mutation: Optional[str] = None
    max_generations: int = 100
    sample_rate: int = 10
    convergence_patience: Optional[int] = None
    seed: Optional[int] = None

    @property
    def effective_replacement_count(self) -> int:
        """實際使用的取代數量（奇數向上取偶數）"""
        if self.replacement_count is None:
            return round_up_even(self.population_size // 2)
        return round_up_even(self.replacement_count)

    def validate(self) -> None:
        """驗證配置是否有效

        Raises:
            InvalidConfigurationError: 若任何數值參數不合法
            StrategyParseError: 若任何策略字串無法解析
        """
        if self.population_size < 2:
            raise InvalidConfigurationError(
                f"Population size must be at least 2, got {self.population_size}"
            )
        validate_replacement_count(self.effective_replacement_count, self.population_size)
        validate_mutation_rate(self.mutation_rate)
        if self.max_generations < 1:
            raise InvalidConfigurationError(
                f"Max generations must be at least 1, got {self.max_generations}"
            )
        if self.sample_rate < 1:
            raise InvalidConfigurationError(
                f"Sample rate must be at least 1, got {self.sample_rate}"
            )
        if self.convergence_patience is not None and self.convergence_patience < 1:
            raise InvalidConfigurationError(
                f"Convergence patience must be at least 1, got {self.convergence_patience}"
            )
        _resolve_selection(self.selection)
        _resolve_crossover(self.crossover)
        _resolve_mutation(self.mutation)

    def build_evolver(self) -> Evolver:
        """依配置建立 Evolver"""
        self.validate()
        if self.replacement_count is not None and self.replacement_count % 2:
            logger.warning(
                f"Replacement count {self.replacement_count} is odd, "
                f"using {self.effective_replacement_count}"
            )
        evolver = Evolver(
            replacement_count=self.effective_replacement_count,
            mutation_rate=self.mutation_rate,
            selection=_resolve_selection(self.selection),
            crossover=_resolve_crossover(self.crossover),
            mutator=_resolve_mutation(self.mutation),
        )
        logger.info(
            f"Built evolver: {evolver.selection}, {evolver.crossover}, {evolver.mutator}, "
            f"replacing {evolver.replacement_count}/{self.population_size} "
            f"at mutation rate {evolver.mutation_rate}"
        )
        return evolver

    def build_controller(self, evolver: Optional[Evolver] = None) -> GenerationController:
        """依配置建立世代控制器"""
        return GenerationController(
            evolver=evolver or self.build_evolver(),
            max_generations=self.max_generations,
            sample_rate=self.sample_rate,
            convergence_patience=self.convergence_patience,
        )

    def build_random_source(self) -> NumpyRandomSource:
        """依 seed 建立預設隨機來源"""
        return NumpyRandomSource(seed=self.seed)

    def to_dict(self) -> Dict[str, Any]:
        """轉換為字典"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvolutionConfig":
        """從字典建立

        Raises:
            InvalidConfigurationError: 若包含未知的鍵
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                f"Valid keys are: {', '.join(sorted(known))}",
            )
        return cls(**data)

    def to_json(self) -> str:
        """序列化為 JSON 字串"""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, text: str) -> "EvolutionConfig":
        """從 JSON 字串建立"""
        return cls.from_dict(json.loads(text))
