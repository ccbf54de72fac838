"""
基因組資料模型 (Genome Data Models)

定義演化引擎的核心資料結構：物種 (Species) 描述基因組形狀，
染色體 (Chromosome) 為單一候選解，並提供固定寬度的整數打包編碼。
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from .exceptions import (
    EncodingWidthError,
    InvalidConfigurationError,
    PermutationRangeError,
    RandomSourceExhaustedError,
)
from .random_source import RandomSource


Gene = int
"""單一基因的值，介於 [0, max_allele]"""

Fitness = int
"""適應度分數（有號 64 位元範圍），越高越好；最小化問題可取負值"""

ENCODING_WIDTH = 64
"""打包編碼的整數位元寬度"""


@dataclass(frozen=True)
class Species:
    """物種

    同一族群中所有染色體共用的基因組形狀。建立後不可變，
    可在任意數量的染色體與執行緒間共用。

    Attributes:
        num_genes: 基因位置數量
        max_allele: 任一基因的最大值（含）
    """
    num_genes: int
    max_allele: Gene

    def __post_init__(self):
        if self.num_genes < 1:
            raise InvalidConfigurationError(
                f"Species must have at least one gene, got {self.num_genes}"
            )
        if self.max_allele < 0:
            raise InvalidConfigurationError(
                f"Species max allele must be non-negative, got {self.max_allele}"
            )

    @property
    def bits_per_gene(self) -> int:
        """每個基因在打包編碼中佔用的位元數 ceil(log2(max_allele + 1))"""
        return self.max_allele.bit_length()

    @property
    def encoded_bits(self) -> int:
        """整條染色體打包後的位元數"""
        return self.num_genes * self.bits_per_gene

    @property
    def max_encodable_genes(self) -> int:
        """此等位基因範圍下，可放入 64 位元整數的最大基因數"""
        if self.bits_per_gene == 0:
            return ENCODING_WIDTH
        return ENCODING_WIDTH // self.bits_per_gene

    def new(self, *genes: Gene) -> "Chromosome":
        """建立此物種的染色體

        基因初始為 0，傳入的值依序覆寫開頭的位置；多餘的值會被忽略。

        Args:
            genes: 開頭位置的基因值

        Returns:
            新的染色體
        """
        values = [0] * self.num_genes
        for i, gene in enumerate(genes[:self.num_genes]):
            values[i] = gene
        return Chromosome(species=self, genes=values)

    def new_random(self, rng: RandomSource) -> "Chromosome":
        """建立隨機初始化的染色體

        每個基因獨立地由一個隨機位元組對 (max_allele + 1) 取餘數而得。
        當 max_allele + 1 不是 2 的冪次時，此歸約帶有輕微的取餘偏差；
        這是已知的統計瑕疵，為了與既有編碼結果相容而保留。

        Args:
            rng: 隨機來源

        Returns:
            隨機染色體

        Raises:
            RandomSourceExhaustedError: 若隨機來源提供的位元組不足
        """
        data = rng.read(self.num_genes)
        if len(data) != self.num_genes:
            raise RandomSourceExhaustedError(self.num_genes, len(data))
        modulus = self.max_allele + 1
        return Chromosome(species=self, genes=[b % modulus for b in data])

    def new_permutation(self, rng: RandomSource) -> "Chromosome":
        """建立排列型染色體

        基因為 [0, num_genes) 的均勻隨機排列，適用於排序類問題（例如旅行推銷員）。

        Args:
            rng: 隨機來源

        Returns:
            排列染色體

        Raises:
            PermutationRangeError: 若 max_allele < num_genes - 1
        """
        if self.max_allele < self.num_genes - 1:
            raise PermutationRangeError(self.num_genes, self.max_allele)
        return Chromosome(species=self, genes=list(rng.perm(self.num_genes)))

    def _check_width(self) -> None:
        if self.encoded_bits > ENCODING_WIDTH:
            raise EncodingWidthError(self.num_genes, self.bits_per_gene, ENCODING_WIDTH)

    def encode(self, chromosome: "Chromosome") -> int:
        """將染色體打包為無號整數

        第 0 個基因佔據最高的 bits_per_gene 位元，最後一個基因佔據最低位元。

        Args:
            chromosome: 要編碼的染色體

        Returns:
            打包後的整數

        Raises:
            EncodingWidthError: 若打包位元數超過 64
            ValueError: 若染色體不屬於此物種或基因超出範圍
        """
        self._check_width()
        if chromosome.species != self:
            raise ValueError(
                f"Cannot encode a chromosome of {chromosome.species} with {self}"
            )

        packed = 0
        bits = self.bits_per_gene
        for i, gene in enumerate(chromosome.genes):
            if not 0 <= gene <= self.max_allele:
                raise ValueError(
                    f"Gene {i} has allele {gene} outside [0, {self.max_allele}]"
                )
            packed = (packed << bits) | gene
        return packed

    def decode(self, packed: int) -> "Chromosome":
        """將打包整數還原為染色體

        為 encode 的反函數：decode(encode(c)) == c。

        Args:
            packed: 打包後的整數

        Returns:
            還原的染色體

        Raises:
            EncodingWidthError: 若打包位元數超過 64
            ValueError: 若整數超出此物種的編碼範圍
        """
        self._check_width()
        if not 0 <= packed < (1 << self.encoded_bits):
            raise ValueError(
                f"Packed value {packed:#x} does not fit {self.encoded_bits} bits"
            )

        bits = self.bits_per_gene
        mask = (1 << bits) - 1
        genes = [0] * self.num_genes
        for i in range(self.num_genes - 1, -1, -1):
            genes[i] = packed & mask
            packed >>= bits
        return Chromosome(species=self, genes=genes)


@dataclass
class Chromosome:
    """染色體

    單一候選解：一串基因值加上所屬物種的共用參照。

    Attributes:
        species: 所屬物種（唯讀、共用）
        genes: 基因值列表，長度為 species.num_genes
    """
    species: Species
    genes: List[Gene] = field(default_factory=list)

    def copy(self) -> "Chromosome":
        """建立獨立副本（共用同一物種）"""
        return Chromosome(species=self.species, genes=list(self.genes))

    def encode(self) -> int:
        """以所屬物種的編碼打包此染色體"""
        return self.species.encode(self)

    def __len__(self) -> int:
        return len(self.genes)


def same_species(chromosomes: Sequence[Chromosome]) -> Species:
    """驗證所有染色體屬於同一物種並回傳該物種

    Raises:
        ValueError: 若列表為空或物種不一致
    """
    if not chromosomes:
        raise ValueError("Chromosome list cannot be empty")
    species = chromosomes[0].species
    for chromosome in chromosomes[1:]:
        if chromosome.species != species:
            raise ValueError(
                f"Chromosomes belong to different species: {species} and {chromosome.species}"
            )
    return species
