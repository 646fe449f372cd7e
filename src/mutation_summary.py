#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
mutation_summary.py - per sequence and per group mutation counts
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17
"""
import re
from collections.abc import Callable
from pathlib import Path

from mcy_columns import GroupSummary, SequenceMutations
from mutation_classifier import count_mutations

UNKNOWN = 'Unknown'

class ReferenceNotFoundError(KeyError):
    """The requested reference header is not in the alignment."""

def extract_genus(header: str) -> str:
    """First word of letters in a header, or 'Unknown'."""
    match = re.search(r'\b([A-Za-z]+)\b', header)
    return match.group(1) if match else UNKNOWN

def extract_order(header: str) -> str:
    """The value of an [order=...] tag in a header, or 'Unknown'."""
    match = re.search(r'\[order\s*=\s*([^\]]+)\]', header, re.IGNORECASE)
    return match.group(1).strip() if match else UNKNOWN

def order_from_path(filename: str) -> str:
    """Name of the directory holding an alignment file, or 'Unknown'.

    Alignments are written to msa_root/{order}/, so the directory is the order.
    """
    name = Path(filename).parent.name
    return name if name else UNKNOWN

def summarize_mutations(seqs: dict[str, str],
                        reference_header: str,
                        group_func: Callable[[str], str]) -> tuple[list[SequenceMutations], list[GroupSummary]]:
    """Count mutations of each sequence against the reference and group the counts

    Parameters
    ----------
    seqs : dict[str, str]
        aligned sequences
    reference_header : str
        header of the reference sequence. The reference is not counted.
    group_func : Callable[[str], str]
        maps a sequence header to its genus or order

    Returns
    -------
    tuple[list[SequenceMutations], list[GroupSummary]]
        A tuple:
            one SequenceMutations per sequence, in alignment order
            one GroupSummary per group, in order of first appearance

    Raises
    ------
    ReferenceNotFoundError
        if reference_header is not in seqs
    """
    if reference_header not in seqs:
        raise ReferenceNotFoundError(f"Reference header '{reference_header}' not found in alignment.")
    reference = seqs[reference_header]

    per_sequence = []
    groups = dict()
    for header, seq in seqs.items():
        if header == reference_header:
            continue
        muts = count_mutations(reference, seq)
        group = group_func(header)
        groups.setdefault(group, GroupSummary(group)).mutations.append(muts)
        per_sequence.append(SequenceMutations(header, group, muts))

    return (per_sequence, list(groups.values()))
