"""
Tests for mutation strategies.

Mutations are checked on the packed encoding of a four-gene byte
chromosome so each scripted case reads as a single hex value.
"""

import pytest
from hypothesis import given, strategies as st, settings

from genetics.exceptions import InvalidConfigurationError
from genetics.models import Species
from genetics.mutation import (
    InversionMutation,
    RandomResettingMutation,
    ScrambleMutation,
    SwapMutation,
)
from genetics.random_source import NumpyRandomSource, ScriptedRandomSource


BYTE_SPECIES = Species(4, 0xFF)
NIBBLE_SPECIES = Species(4, 0xF)


MUTATION_CASES = [
    # (tag, species, strategy, draws, before, after)
    ("reset first", BYTE_SPECIES, RandomResettingMutation(), (0, 0xDA), 0xBAADF00D, 0xDAADF00D),
    ("reset middle", BYTE_SPECIES, RandomResettingMutation(), (2, 0xD0), 0xBAADF00D, 0xBAADD00D),
    ("reset last", BYTE_SPECIES, RandomResettingMutation(), (3, 0x01), 0xBAADF00D, 0xBAADF001),
    ("reset skipped by frequency", BYTE_SPECIES, RandomResettingMutation(0.01), (0.5,), 0xBAADF00D, 0xBAADF00D),
    ("reset nibble first", NIBBLE_SPECIES, RandomResettingMutation(0.5), (0, 0, 0xD), 0xF00D, 0xD00D),
    ("reset nibble last", NIBBLE_SPECIES, RandomResettingMutation(0.5), (0, 3, 0xE), 0xF00D, 0xF00E),
    ("swap begin", BYTE_SPECIES, SwapMutation(), (0, 0), 0xBAADF00D, 0xADBAF00D),
    ("swap end", BYTE_SPECIES, SwapMutation(), (2, 0), 0xBAADF00D, 0xBAAD0DF0),
    ("swap outer", BYTE_SPECIES, SwapMutation(), (0, 2), 0xBAADF00D, 0x0DADF0BA),
    ("swap middle", BYTE_SPECIES, SwapMutation(), (1, 0), 0xBAADF00D, 0xBAF0AD0D),
    ("scramble begin", BYTE_SPECIES, ScrambleMutation(), (0, 0, 1), 0xBAADF00D, 0xADBAF00D),
    ("scramble end", BYTE_SPECIES, ScrambleMutation(), (2, 0, 1), 0xBAADF00D, 0xBAAD0DF0),
    ("scramble middle", BYTE_SPECIES, ScrambleMutation(), (1, 0, 1), 0xBAADF00D, 0xBAF0AD0D),
    ("scramble rotate tail", BYTE_SPECIES, ScrambleMutation(), (1, 1, 1, 2), 0xBAADF00D, 0xBAF00DAD),
    ("invert begin", BYTE_SPECIES, InversionMutation(), (0, 0), 0xBAADF00D, 0xADBAF00D),
    ("invert end", BYTE_SPECIES, InversionMutation(), (2, 0), 0xBAADF00D, 0xBAAD0DF0),
    ("invert middle", BYTE_SPECIES, InversionMutation(), (1, 0), 0xBAADF00D, 0xBAF0AD0D),
    ("invert whole", BYTE_SPECIES, InversionMutation(), (0, 2), 0xBAADF00D, 0x0DF0ADBA),
]


class TestScriptedMutation:
    """Test scripted mutation outcomes"""

    @pytest.mark.parametrize(
        "tag,species,strategy,draws,before,after",
        MUTATION_CASES,
        ids=[case[0] for case in MUTATION_CASES],
    )
    def test_mutation(self, tag, species, strategy, draws, before, after):
        """Test the mutated chromosome encodes to the expected value"""
        rng = ScriptedRandomSource(*draws)
        chromosome = species.decode(before)

        strategy.mutate(rng, chromosome)

        assert chromosome.encode() == after, f"{tag}: got {chromosome.encode():#x}"
        assert rng.remaining == 0


PERMUTATION_MUTATORS = [SwapMutation(), ScrambleMutation(), InversionMutation()]


class TestPermutationMutators:
    """Test mutators that reorder genes"""

    @pytest.mark.parametrize("mutator", PERMUTATION_MUTATORS, ids=str)
    @given(n=st.integers(min_value=2, max_value=40), seed=st.integers(min_value=0, max_value=10**6))
    @settings(max_examples=50)
    def test_preserves_permutation(self, mutator, n, seed):
        """Test reordering mutators keep a permutation valid"""
        rng = NumpyRandomSource(seed=seed)
        chromosome = Species(n, n - 1).new_permutation(rng)
        mutator.mutate(rng, chromosome)
        assert sorted(chromosome.genes) == list(range(n))

    @pytest.mark.parametrize("mutator", PERMUTATION_MUTATORS, ids=str)
    def test_requires_two_genes(self, mutator):
        """Test a single-gene chromosome cannot be reordered"""
        with pytest.raises(InvalidConfigurationError):
            mutator.mutate(ScriptedRandomSource(), Species(1, 5).new(3))

    def test_swap_always_changes_two_positions(self):
        """Test swap never picks the same position twice"""
        rng = NumpyRandomSource(seed=4)
        species = Species(6, 5)
        for _ in range(100):
            chromosome = species.new(0, 1, 2, 3, 4, 5)
            SwapMutation().mutate(rng, chromosome)
            moved = [i for i, g in enumerate(chromosome.genes) if g != i]
            assert len(moved) == 2


class TestRandomResettingMutation:
    """Test RandomResettingMutation validation"""

    def test_requires_two_alleles(self):
        """Test a species with a single allele cannot be reset"""
        with pytest.raises(InvalidConfigurationError):
            RandomResettingMutation().mutate(ScriptedRandomSource(), Species(3, 0).new())

    def test_never_draws_top_allele(self):
        """Test the reset value is drawn from [0, max_allele)"""
        rng = NumpyRandomSource(seed=8)
        chromosome = Species(1, 1).new(1)
        for _ in range(50):
            RandomResettingMutation().mutate(rng, chromosome)
            assert chromosome.genes == [0]

    def test_frequency_within_bound_mutates(self):
        """Test a draw at or below the frequency performs the reset"""
        chromosome = BYTE_SPECIES.decode(0xBAADF00D)
        RandomResettingMutation(0.5).mutate(ScriptedRandomSource(0.5, 1, 0), chromosome)
        assert chromosome.encode() == 0xBA00F00D

    @pytest.mark.parametrize("strategy,name", [
        (RandomResettingMutation(), "RandomResettingMutation"),
        (SwapMutation(), "SwapMutation"),
        (ScrambleMutation(), "ScrambleMutation"),
        (InversionMutation(), "InversionMutation"),
    ])
    def test_names(self, strategy, name):
        assert str(strategy) == name
