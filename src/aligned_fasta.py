#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
aligned_fasta.py - read MSA FASTA files written by the aligner
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17
"""
from collections.abc import Iterable

def parse_aligned_fasta(lines: Iterable[str]) -> dict[str, str]:
    """Parse the lines of an aligned FASTA file

    Parameters
    ----------
    lines : Iterable[str]
        Lines of the FASTA file. Lines before the first header are ignored.

    Returns
    -------
    dict[str, str]
        A dictionary
            key: header without the '>', stripped
            value: the aligned sequence
        Records are in file order. A repeated header replaces the earlier sequence.
    """
    seqs = dict()
    header = None
    chunks = []
    for line in lines:
        if line.startswith('>'):
            if header is not None:
                seqs[header] = ''.join(chunks)
            header = line[1:].strip()
            chunks = []
        elif header is not None:
            chunks.append(line.strip())

    if header is not None:
        seqs[header] = ''.join(chunks)

    return seqs

def read_aligned_fasta(filename: str) -> dict[str, str]:
    """ Read an MSA FASTA file

    Sequences are not required to have the same length.

    Parameters
    ----------
    filename : str
        MSA file

    Returns
    -------
    dict[str, str]
        header -> aligned sequence, in file order
    """
    with open(filename, 'r', encoding = 'utf-8', errors = 'replace') as f:
        return parse_aligned_fasta(f)

def get_reference_header(filename: str) -> str | None:
    """Header of the first record in a FASTA file, or None if there is none."""
    with open(filename, 'r', encoding = 'utf-8', errors = 'replace') as f:
        for line in f:
            if line.startswith('>'):
                return line[1:].strip()

    return None
