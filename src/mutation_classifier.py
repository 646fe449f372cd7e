#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
mutation_classifier.py - compare aligned sequences to a reference
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17
"""
from mcy_columns import GAP, MutationType

def classify_mutation(reference: str, sequence: str, pos: int) -> MutationType:
    """Classify the change at one aligned position

    Parameters
    ----------
    reference : str
        aligned reference sequence
    sequence : str
        aligned query sequence
    pos : int
        0 based alignment position. Must be a valid index in both sequences.

    Returns
    -------
    MutationType
        NONE if the bases match, FRAMESHIFT_DELETION if the query has a gap,
        FRAMESHIFT_INSERTION if the reference has a gap, otherwise MISSENSE.
    """
    ref_nuc = reference[pos]
    nuc = sequence[pos]
    if ref_nuc == nuc:
        return MutationType.NONE
    if nuc == GAP:
        return MutationType.FRAMESHIFT_DELETION
    if ref_nuc == GAP:
        return MutationType.FRAMESHIFT_INSERTION

    return MutationType.MISSENSE

def count_mutations(reference: str, sequence: str) -> int:
    """Count mismatches between reference and sequence, ignoring gap positions

    Parameters
    ----------
    reference : str
        aligned reference sequence
    sequence : str
        aligned query sequence

    Returns
    -------
    int
        Number of positions, up to the shorter length, where neither
        sequence has a gap and the bases differ.
    """
    mutations = 0
    for ref_nuc, nuc in zip(reference, sequence):
        if ref_nuc == GAP or nuc == GAP:
            continue
        if ref_nuc != nuc:
            mutations += 1

    return mutations
