#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
report_writer.py - write matrices and summaries as CSV and TSV files
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17
"""
import numpy as np
import pandas as pd

from mcy_columns import (REPORTED_TYPES, GeneOrderStats, GroupSummary,
                         MatrixSummaryRow, MutationTypeCounts, SequenceMutations)

MUTATION_TYPE_COLUMNS = ['Gene', 'Order'] + [t.value for t in REPORTED_TYPES]
MATRIX_SUMMARY_COLUMNS = ['Gene', 'Order', 'SeqHeader', 'PercentMutated', 'NumMutated', 'NumPositions']
GENE_ORDER_STATS_COLUMNS = ['Gene', 'Order', 'PolymorphicSites', 'NucleotideDiversity',
                            'TajimasD', 'RecombinationRate', 'MutationRatePerBase']

def matrix_df(matrix: np.ndarray, row_labels: list[str], col_labels: list[str]) -> pd.DataFrame:
    """Make a DataFrame from a feature matrix

    Parameters
    ----------
    matrix : np.ndarray
        0/1 matrix from mutation_matrix
    row_labels : list[str]
        one label per row
    col_labels : list[str]
        one label per column

    Returns
    -------
    pd.DataFrame
        the matrix with row labels as index
    """
    df = pd.DataFrame(matrix, index = row_labels, columns = col_labels)
    df.index.name = 'SeqHeader'

    return df

def write_matrix_csv(matrix: np.ndarray, row_labels: list[str], col_labels: list[str],
                     filename: str, sep: str = ',') -> None:
    """Write a feature matrix with a SeqHeader column and one header line."""
    matrix_df(matrix, row_labels, col_labels).to_csv(filename, sep = sep)

def write_mutation_summary(per_sequence: list[SequenceMutations],
                           groups: list[GroupSummary],
                           group_label: str,
                           filename: str) -> None:
    """Write the per sequence counts, a blank line, then the per group averages

    Parameters
    ----------
    per_sequence : list[SequenceMutations]
        from mutation_summary.summarize_mutations
    groups : list[GroupSummary]
        from mutation_summary.summarize_mutations
    group_label : str
        'Genus' or 'Order'
    filename : str
        output TSV file
    """
    seq_df = pd.DataFrame([[s.header, s.group, s.mutations] for s in per_sequence],
                          columns = ['Header', group_label, 'Mutations'])
    group_df = pd.DataFrame([g.to_list() for g in groups],
                            columns = [group_label, 'NumSequences', 'AvgMutations'])

    with open(filename, 'w', newline = '') as f:
        seq_df.to_csv(f, sep = '\t', index = False, lineterminator = '\n')
        f.write('\n')
        group_df.to_csv(f, sep = '\t', index = False, lineterminator = '\n')

def write_mutation_type_summary(type_counts: list[MutationTypeCounts], filename: str) -> None:
    df = pd.DataFrame([c.to_list() for c in type_counts], columns = MUTATION_TYPE_COLUMNS)
    df.to_csv(filename, index = False)

def write_matrix_summary(rows: list[MatrixSummaryRow], filename: str) -> None:
    df = pd.DataFrame([r.to_list() for r in rows], columns = MATRIX_SUMMARY_COLUMNS)
    df.to_csv(filename, index = False)

def write_gene_order_stats(stats: list[GeneOrderStats], filename: str) -> None:
    """Write the consolidated gene/order statistics table. Missing floats are written as NaN."""
    df = pd.DataFrame([s.to_list() for s in stats], columns = GENE_ORDER_STATS_COLUMNS)
    df.to_csv(filename, sep = '\t', index = False, na_rep = 'NaN')
