"""
Tests for the genome data model.

Covers species construction, chromosome creation and the packed-integer
codec, including the round-trip property for every encodable width.
"""

import pytest
from hypothesis import given, strategies as st, settings

from genetics.exceptions import (
    EncodingWidthError,
    InvalidConfigurationError,
    PermutationRangeError,
    RandomSourceExhaustedError,
)
from genetics.models import ENCODING_WIDTH, Chromosome, Species, same_species
from genetics.random_source import NumpyRandomSource, ScriptedRandomSource


# =============================================================================
# Hypothesis Strategies
# =============================================================================

@st.composite
def encodable_chromosome_strategy(draw):
    """Generate a chromosome whose species fits the packed encoding."""
    max_allele = draw(st.integers(min_value=0, max_value=(1 << 16) - 1))
    species = Species(1, max_allele)
    num_genes = draw(st.integers(min_value=1, max_value=species.max_encodable_genes))
    species = Species(num_genes, max_allele)
    genes = draw(st.lists(
        st.integers(min_value=0, max_value=max_allele),
        min_size=num_genes,
        max_size=num_genes,
    ))
    return species.new(*genes)


class TestSpecies:
    """Test Species construction and derived properties"""

    def test_species_fields(self):
        """Test Species stores its shape"""
        species = Species(num_genes=5, max_allele=20)
        assert species.num_genes == 5
        assert species.max_allele == 20

    def test_species_is_immutable(self):
        """Test Species cannot be modified after construction"""
        species = Species(5, 20)
        with pytest.raises(AttributeError):
            species.num_genes = 6

    @pytest.mark.parametrize("max_allele,bits", [
        (0, 0), (1, 1), (2, 2), (3, 2), (4, 3), (7, 3), (8, 4), (0xFF, 8), (0x100, 9),
    ])
    def test_bits_per_gene(self, max_allele, bits):
        """Test bits_per_gene is ceil(log2(max_allele + 1))"""
        assert Species(1, max_allele).bits_per_gene == bits

    def test_max_encodable_genes(self):
        """Test the largest gene count that fits 64 bits"""
        assert Species(1, 1).max_encodable_genes == 64
        assert Species(1, 0xFF).max_encodable_genes == 8
        assert Species(1, 1000).max_encodable_genes == 6

    def test_invalid_num_genes(self):
        """Test species without genes is rejected"""
        with pytest.raises(InvalidConfigurationError):
            Species(0, 1)

    def test_invalid_max_allele(self):
        """Test negative allele range is rejected"""
        with pytest.raises(InvalidConfigurationError):
            Species(4, -1)


class TestChromosomeCreation:
    """Test Species.new, new_random and new_permutation"""

    def test_new_is_zero_filled(self):
        """Test new() without values creates all-zero genes"""
        species = Species(4, 9)
        chromosome = species.new()
        assert chromosome.genes == [0, 0, 0, 0]
        assert chromosome.species is species

    def test_new_seeds_prefix(self):
        """Test new() overwrites leading positions and zero-fills the rest"""
        assert Species(4, 9).new(1, 2).genes == [1, 2, 0, 0]

    def test_new_ignores_excess(self):
        """Test new() ignores values beyond num_genes"""
        assert Species(2, 9).new(1, 2, 3, 4).genes == [1, 2]

    def test_copy_is_independent(self):
        """Test copy() shares species but not genes"""
        original = Species(3, 9).new(1, 2, 3)
        clone = original.copy()
        clone.genes[0] = 9
        assert original.genes == [1, 2, 3]
        assert clone.species is original.species

    def test_new_random_reduces_bytes_modulo(self):
        """Test each gene is one random byte modulo max_allele + 1"""
        rng = ScriptedRandomSource(25, 9, 10, 255)
        chromosome = Species(4, 9).new_random(rng)
        assert chromosome.genes == [5, 9, 0, 5]

    def test_new_random_fails_when_source_runs_dry(self):
        """Test a short read raises RandomSourceExhaustedError"""
        rng = ScriptedRandomSource(1, 2)
        with pytest.raises(RandomSourceExhaustedError):
            Species(4, 9).new_random(rng)

    def test_new_random_within_bounds(self):
        """Test random genes stay within [0, max_allele]"""
        species = Species(32, 6)
        rng = NumpyRandomSource(seed=7)
        for _ in range(50):
            chromosome = species.new_random(rng)
            assert all(0 <= g <= 6 for g in chromosome.genes)

    def test_new_permutation_is_complete(self):
        """Test a permutation of 20 genes holds each of 0..19 once"""
        chromosome = Species(20, 19).new_permutation(NumpyRandomSource(seed=1))
        assert sorted(chromosome.genes) == list(range(20))

    def test_new_permutation_requires_allele_range(self):
        """Test permutation of 20 genes with max allele 18 fails"""
        with pytest.raises(InvalidConfigurationError):
            Species(20, 18).new_permutation(NumpyRandomSource(seed=1))

    def test_new_permutation_error_type(self):
        """Test permutation failure is a PermutationRangeError with details"""
        with pytest.raises(PermutationRangeError) as exc_info:
            Species(5, 2).new_permutation(ScriptedRandomSource())
        assert exc_info.value.num_genes == 5
        assert exc_info.value.max_allele == 2

    def test_new_permutation_uses_source_order(self):
        """Test the permutation is assigned positionally"""
        rng = ScriptedRandomSource(2, 0, 3, 1)
        assert Species(4, 3).new_permutation(rng).genes == [2, 0, 3, 1]


class TestCodec:
    """Test the packed-integer encoding"""

    def test_encode_most_significant_gene_first(self):
        """Test gene 0 occupies the highest bits"""
        species = Species(4, 0xFF)
        assert species.new(0xBA, 0xAD, 0xF0, 0x0D).encode() == 0xBAADF00D

    def test_encode_nibbles(self):
        """Test packing with 4 bits per gene"""
        species = Species(4, 0xF)
        assert species.encode(species.new(0xF, 0x0, 0x0, 0xD)) == 0xF00D

    def test_encode_binary(self):
        """Test packing with 1 bit per gene"""
        species = Species(16, 1)
        genes = [int(b) for b in format(0xD00D, "016b")]
        assert species.encode(species.new(*genes)) == 0xD00D

    def test_decode(self):
        """Test decode splits a packed integer into genes"""
        assert Species(4, 0xFF).decode(0xBAADF00D).genes == [0xBA, 0xAD, 0xF0, 0x0D]

    def test_decode_full_width(self):
        """Test the top bit of a 64-bit encoding survives decoding"""
        species = Species(64, 1)
        chromosome = species.decode((1 << 64) - 1)
        assert chromosome.genes == [1] * 64
        assert chromosome.encode() == (1 << 64) - 1

    def test_zero_bit_species(self):
        """Test a species whose only allele is 0 encodes to 0"""
        species = Species(3, 0)
        assert species.encode(species.new()) == 0
        assert species.decode(0).genes == [0, 0, 0]

    def test_encode_width_overflow(self):
        """Test encoding more than 64 bits fails"""
        species = Species(9, 0xFF)
        with pytest.raises(EncodingWidthError):
            species.encode(species.new())
        with pytest.raises(InvalidConfigurationError):
            species.decode(0)

    def test_encode_rejects_out_of_range_gene(self):
        """Test genes above max_allele cannot be packed"""
        species = Species(2, 3)
        with pytest.raises(ValueError):
            species.encode(species.new(1, 4))

    def test_encode_rejects_foreign_species(self):
        """Test encoding a chromosome of another species fails"""
        with pytest.raises(ValueError):
            Species(2, 3).encode(Species(3, 3).new())

    def test_decode_rejects_oversized_value(self):
        """Test decoding a value wider than the species fails"""
        with pytest.raises(ValueError):
            Species(2, 3).decode(1 << 4)
        with pytest.raises(ValueError):
            Species(2, 3).decode(-1)

    @pytest.mark.parametrize("max_allele", [1, 2, 5, 0xFF, 1000])
    def test_round_trip_every_width(self, max_allele):
        """Test decode(encode(c)) == c for every encodable gene count"""
        rng = NumpyRandomSource(seed=max_allele)
        for num_genes in range(1, Species(1, max_allele).max_encodable_genes + 1):
            species = Species(num_genes, max_allele)
            for _ in range(100):
                genes = [rng.int31n(max_allele + 1) for _ in range(num_genes)]
                want = species.new(*genes)
                got = species.decode(species.encode(want))
                assert got == want, f"Round trip failed for {num_genes} genes"

    @given(chromosome=encodable_chromosome_strategy())
    @settings(max_examples=200)
    def test_round_trip_property(self, chromosome: Chromosome):
        """Test decode is the inverse of encode for arbitrary species"""
        species = chromosome.species
        packed = species.encode(chromosome)
        assert 0 <= packed < (1 << ENCODING_WIDTH)
        assert species.decode(packed) == chromosome


class TestSameSpecies:
    """Test the same_species helper"""

    def test_returns_shared_species(self):
        species = Species(3, 3)
        assert same_species([species.new(), species.new()]) is species

    def test_rejects_mixed_species(self):
        with pytest.raises(ValueError):
            same_species([Species(3, 3).new(), Species(4, 3).new()])

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            same_species([])
