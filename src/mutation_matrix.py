#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
mutation_matrix.py - build feature matrices from aligned sequences
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17

Two matrices are built from an alignment:
    a binary mutation matrix, 1 where a sequence differs from the reference
    a one-hot matrix with one column per position and base
The reference is the first sequence in the alignment.
"""
import logging
from pathlib import Path

import numpy as np

from mcy_columns import BASES, GAP, MatrixSummaryRow, MutationTypeCounts
from mutation_classifier import classify_mutation

logger = logging.getLogger(__name__)

MATRIX_SUFFIX = '_mutation_matrix.csv'

def build_mutation_matrix(seqs: dict[str, str]) -> tuple[np.ndarray, list[str], list[str]] | None:
    """Build a binary mutation matrix

    Parameters
    ----------
    seqs : dict[str, str]
        aligned sequences from read_aligned_fasta. The first is the reference.

    Returns
    -------
    tuple[np.ndarray, list[str], list[str]] | None
        A tuple:
            matrix, rows = sequences (reference included), columns = reference positions
            row labels Seq1, Seq2, ...
            column labels Pos1, Pos2, ...
        None if seqs is empty.

    Note: gaps are not skipped. Positions past the end of a shorter sequence are 1.
    """
    if not seqs:
        return None

    headers = list(seqs.keys())
    reference = np.array(list(seqs[headers[0]]), dtype = 'U1')
    seq_len = len(reference)

    matrix = np.ones((len(headers), seq_len), dtype = np.uint8)
    for row, header in enumerate(headers):
        seq = seqs[header][:seq_len]
        if seq:
            matrix[row, :len(seq)] = np.array(list(seq), dtype = 'U1') != reference[:len(seq)]

    row_labels = [f'Seq{i + 1}' for i in range(len(headers))]
    col_labels = [f'Pos{j + 1}' for j in range(seq_len)]

    return (matrix, row_labels, col_labels)

def build_onehot_matrix(seqs: dict[str, str],
                        bases: tuple[str, ...] = BASES) -> tuple[np.ndarray, list[str], list[str]] | None:
    """Build a one-hot matrix of aligned bases

    Parameters
    ----------
    seqs : dict[str, str]
        aligned sequences from read_aligned_fasta
    bases : tuple[str, ...], optional
        the alphabet, by default A, C, G, T and gap

    Returns
    -------
    tuple[np.ndarray, list[str], list[str]] | None
        A tuple:
            matrix, rows = sequences, columns = positions * bases
            row labels, the sequence headers
            column labels Pos1_A, Pos1_C, ...
        None if seqs is empty.

    Note: the width is set by the first sequence. Missing positions are read as a gap.
    A base not in the alphabet gives a block of zeros.
    """
    if not seqs:
        return None

    headers = list(seqs.keys())
    seq_len = len(seqs[headers[0]])
    alphabet = np.array(bases, dtype = 'U1')

    matrix = np.zeros((len(headers), seq_len * len(alphabet)), dtype = np.uint8)
    for row, header in enumerate(headers):
        padded = seqs[header][:seq_len].ljust(seq_len, GAP)
        if seq_len:
            onehot = np.array(list(padded), dtype = 'U1')[:, np.newaxis] == alphabet[np.newaxis, :]
            matrix[row, :] = onehot.reshape(-1)

    col_labels = [f'Pos{pos + 1}_{b}' for pos in range(seq_len) for b in bases]

    return (matrix, headers, col_labels)

def count_mutation_types(seqs: dict[str, str], gene: str, order: str) -> MutationTypeCounts:
    """Tally mutation types of every sequence against the first (reference) sequence

    Positions beyond the end of a shorter sequence are skipped.
    """
    counts = MutationTypeCounts(gene = gene, order = order)
    if not seqs:
        return counts

    headers = list(seqs.keys())
    reference = seqs[headers[0]]
    for header in headers[1:]:
        seq = seqs[header]
        for pos in range(min(len(reference), len(seq))):
            counts.add(classify_mutation(reference, seq, pos))

    return counts

def summarize_matrix_file(filename: str, gene: str, order: str) -> list[MatrixSummaryRow]:
    """Percent of mutated positions for each row of a mutation matrix CSV

    Parameters
    ----------
    filename : str
        a CSV written by report_writer.write_matrix_csv
    gene : str
        gene name for the output rows
    order : str
        order name for the output rows

    Returns
    -------
    list[MatrixSummaryRow]
        one row per matrix row. The number of positions comes from the header line.
        Rows with fewer fields are skipped. Extra fields in a row are counted.
    """
    rows = []
    with open(filename, 'r', encoding = 'utf-8', errors = 'replace') as f:
        header = f.readline().rstrip('\r\n')
        num_positions = len(header.split(',')) - 1
        if num_positions < 1:
            logger.warning(f'No positions in matrix file: {filename}')
            return rows

        for line in f:
            tokens = line.rstrip('\r\n').split(',')
            if len(tokens) < num_positions + 1:
                continue
            rows.append(MatrixSummaryRow(gene = gene, order = order, seq_header = tokens[0],
                                         num_mutated = tokens[1:].count('1'),
                                         num_positions = num_positions))

    return rows

def summarize_matrix_directory(matrix_dir: str) -> list[MatrixSummaryRow]:
    """Summarize every {order}_{gene}_mutation_matrix.csv file in a directory

    Files are read in name order.
    """
    rows = []
    for path in sorted(Path(matrix_dir).glob('*' + MATRIX_SUFFIX)):
        parts = path.name.split('_')
        if len(parts) < 3:
            continue
        order, gene = parts[0], parts[1]
        rows.extend(summarize_matrix_file(str(path), gene, order))

    return rows
