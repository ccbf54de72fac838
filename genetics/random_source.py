"""
隨機來源 (Random Source)

所有演化算子的隨機性都經由此介面取得。呼叫端明確地將隨機來源傳入每個
隨機操作，因此只要固定來源的輸出序列，整個演化過程即可完整重播。
"""

from typing import List, MutableSequence, Protocol, Sequence, Union

import numpy as np

from .exceptions import RandomSourceExhaustedError


MAX_INT31 = (1 << 31) - 1
MAX_INT63 = (1 << 63) - 1

ScriptedValue = Union[int, float]


def _check_bound(n: int, limit: int) -> None:
    if n <= 0:
        raise ValueError(f"Invalid argument to random draw: n must be positive, got {n}")
    if n > limit:
        raise ValueError(f"Invalid argument to random draw: n must be at most {limit}, got {n}")


class RandomSource(Protocol):
    """隨機來源協定

    演化引擎所需的全部隨機能力。實作不需要執行緒安全，
    同一來源不可同時供多個 evolve 呼叫使用。
    """

    def int31n(self, n: int) -> int:
        """回傳 [0, n) 的均勻整數（32 位元範圍）"""
        ...

    def int63n(self, n: int) -> int:
        """回傳 [0, n) 的均勻整數（64 位元範圍）"""
        ...

    def float32(self) -> float:
        """回傳 [0.0, 1.0) 的單精度均勻浮點數"""
        ...

    def float64(self) -> float:
        """回傳 [0.0, 1.0) 的雙精度均勻浮點數"""
        ...

    def read(self, count: int) -> bytes:
        """讀取 count 個隨機位元組；來源耗盡時可能回傳較短的結果"""
        ...

    def perm(self, n: int) -> List[int]:
        """回傳 [0, n) 的均勻隨機排列"""
        ...

    def deal(self, n: int, k: int) -> List[int]:
        """從 [0, n) 中不重複地抽出 k 個值，回傳順序有意義"""
        ...

    def shuffle(self, values: MutableSequence) -> None:
        """就地均勻洗牌"""
        ...


class NumpyRandomSource:
    """以 numpy Generator 為後端的隨機來源

    Attributes:
        generator: 底層的 numpy.random.Generator
    """

    def __init__(
        self,
        seed: Union[int, None] = None,
        generator: Union[np.random.Generator, None] = None,
    ):
        """初始化隨機來源

        Args:
            seed: 隨機種子，None 表示使用系統熵
            generator: 既有的 Generator，若提供則忽略 seed
        """
        self.generator = generator if generator is not None else np.random.default_rng(seed)

    def int31n(self, n: int) -> int:
        _check_bound(n, MAX_INT31)
        return int(self.generator.integers(n))

    def int63n(self, n: int) -> int:
        _check_bound(n, MAX_INT63)
        return int(self.generator.integers(n, dtype=np.int64))

    def float32(self) -> float:
        return float(self.generator.random(dtype=np.float32))

    def float64(self) -> float:
        return float(self.generator.random())

    def read(self, count: int) -> bytes:
        if count < 0:
            raise ValueError(f"Byte count must be non-negative, got {count}")
        return self.generator.bytes(count)

    def perm(self, n: int) -> List[int]:
        return self.generator.permutation(n).tolist()

    def deal(self, n: int, k: int) -> List[int]:
        if k < 0 or k > n:
            raise ValueError(f"Cannot deal {k} distinct values from {n}")
        return self.generator.choice(n, size=k, replace=False).tolist()

    def shuffle(self, values: MutableSequence) -> None:
        self.generator.shuffle(values)


class ScriptedRandomSource:
    """依固定序列回放的隨機來源

    每次整數或浮點抽樣都依序取出下一個預先給定的值；deal 取出 k 個值，
    perm 取出 n 個值，read 將取出的值視為位元組，shuffle 以 int31n 驅動
    Fisher-Yates 洗牌。用於重播演化過程與逐位元驗證演算法。

    Example:
        rng = ScriptedRandomSource(3, 2, 1, 2)
        TournamentSelection(2).select_parents(rng, 2, [4, 20, 16, 3])  # [2, 1]
    """

    def __init__(self, *values: ScriptedValue):
        self._values: List[ScriptedValue] = list(values)
        self._position = 0

    @property
    def remaining(self) -> int:
        """尚未使用的值數量"""
        return len(self._values) - self._position

    def extend(self, values: Sequence[ScriptedValue]) -> None:
        """在序列末端追加值"""
        self._values.extend(values)

    def _next(self, what: str) -> ScriptedValue:
        if self._position >= len(self._values):
            raise RandomSourceExhaustedError(1, 0, what)
        value = self._values[self._position]
        self._position += 1
        return value

    def _next_int(self, n: int, limit: int) -> int:
        _check_bound(n, limit)
        value = self._next("values")
        if isinstance(value, float) or not 0 <= value < n:
            raise ValueError(f"Scripted value {value!r} is not an integer in [0, {n})")
        return value

    def _next_float(self) -> float:
        value = float(self._next("values"))
        if not 0.0 <= value < 1.0:
            raise ValueError(f"Scripted value {value!r} is not a float in [0.0, 1.0)")
        return value

    def int31n(self, n: int) -> int:
        return self._next_int(n, MAX_INT31)

    def int63n(self, n: int) -> int:
        return self._next_int(n, MAX_INT63)

    def float32(self) -> float:
        return self._next_float()

    def float64(self) -> float:
        return self._next_float()

    def read(self, count: int) -> bytes:
        if count < 0:
            raise ValueError(f"Byte count must be non-negative, got {count}")
        available = min(count, self.remaining)
        data = bytes(self._next_int(256, MAX_INT31) for _ in range(available))
        return data

    def perm(self, n: int) -> List[int]:
        if self.remaining < n:
            raise RandomSourceExhaustedError(n, self.remaining, "values")
        result = [self._next_int(n, MAX_INT31) for _ in range(n)]
        if sorted(result) != list(range(n)):
            raise ValueError(f"Scripted values {result} are not a permutation of [0, {n})")
        return result

    def deal(self, n: int, k: int) -> List[int]:
        if k < 0 or k > n:
            raise ValueError(f"Cannot deal {k} distinct values from {n}")
        if self.remaining < k:
            raise RandomSourceExhaustedError(k, self.remaining, "values")
        result = [self._next_int(n, MAX_INT31) for _ in range(k)]
        if len(set(result)) != k:
            raise ValueError(f"Scripted deal {result} repeats a value")
        return result

    def shuffle(self, values: MutableSequence) -> None:
        for i in range(len(values) - 1, 0, -1):
            j = self.int31n(i + 1)
            values[i], values[j] = values[j], values[i]
