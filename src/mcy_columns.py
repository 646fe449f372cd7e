#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
mcy_columns.py - Data classes to hold mutation and summary information
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17
"""
import math
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

GAP = '-'
BASES = ('A', 'C', 'G', 'T', GAP)

class MutationType(Enum):
    """
    Kind of change at a single alignment position.

    Frameshift, Complex and InFrame are never assigned by the single
    position classifier. They are reserved and always reported as 0.
    """
    NONE = 'None'
    MISSENSE = 'Missense'
    FRAMESHIFT = 'Frameshift'
    FRAMESHIFT_DELETION = 'FrameshiftDeletion'
    FRAMESHIFT_INSERTION = 'FrameshiftInsertion'
    COMPLEX = 'Complex'
    IN_FRAME = 'InFrame'

# column order of the mutation type summary
REPORTED_TYPES = (MutationType.MISSENSE, MutationType.FRAMESHIFT,
                  MutationType.FRAMESHIFT_DELETION, MutationType.FRAMESHIFT_INSERTION,
                  MutationType.COMPLEX, MutationType.IN_FRAME)

@dataclass
class MutationTypeCounts:
    """
    A data class for holding mutation type tallies for a gene and order
    """
    gene:       str
    order:      str
    counts:     Counter = field(default_factory = Counter)

    def add(self, mutation_type: MutationType) -> None:
        """Count one mutation. MutationType.NONE is ignored.

        Parameters
        ----------
        mutation_type : MutationType
            the classified mutation
        """
        if mutation_type is not MutationType.NONE:
            self.counts[mutation_type] += 1

    def to_list(self) -> list:
        """convert self to a list

        Returns
        -------
        list
            gene, order, then one count per reported mutation type
        """
        return [self.gene, self.order] + [self.counts[t] for t in REPORTED_TYPES]

@dataclass(frozen=True)
class SequenceMutations:
    """
    Mutation count of one aligned sequence relative to the reference
    """
    header:     str
    group:      str     # genus or order
    mutations:  int

@dataclass
class GroupSummary:
    """
    A data class for holding the mutation counts of one genus or order
    """
    group:      str
    mutations:  list[int] = field(default_factory = list)

    @property
    def num_sequences(self) -> int:
        return len(self.mutations)

    @property
    def avg_mutations(self) -> float:
        return sum(self.mutations) / len(self.mutations) if self.mutations else 0.0

    def to_list(self) -> list:
        return [self.group, self.num_sequences, f'{self.avg_mutations:.2f}']

@dataclass(frozen=True)
class MatrixSummaryRow:
    """
    Percent of mutated positions for one row of a binary mutation matrix
    """
    gene:           str
    order:          str
    seq_header:     str
    num_mutated:    int
    num_positions:  int

    @property
    def percent_mutated(self) -> float:
        return 100.0 * self.num_mutated / self.num_positions

    def to_list(self) -> list:
        return [self.gene, self.order, self.seq_header,
                f'{self.percent_mutated:.2f}', self.num_mutated, self.num_positions]

@dataclass
class GeneOrderStats:
    """
    Population genetics values computed by an external tool for a gene and order.
    Values are passed through, never computed here.
    """
    gene:                   str
    order:                  str
    polymorphic_sites:      int = 0
    nucleotide_diversity:   float = math.nan
    tajimas_d:              float = math.nan
    recombination_rate:     float = math.nan
    mutation_rate_per_base: float = math.nan

    def to_list(self) -> list:
        return [self.gene, self.order, self.polymorphic_sites,
                self.nucleotide_diversity, self.tajimas_d,
                self.recombination_rate, self.mutation_rate_per_base]

@dataclass(frozen=True)
class MsaJob:
    """
    One alignment: a reference FASTA plus the extracted gene FASTAs aligned with it
    """
    name:           str     # e.g. mcya, used in output file names
    ref_fasta:      str
    extracted_fasta: tuple  # tuple so that it is immutable
