#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
gene_order_stats.py - collect population genetics statistics for each gene and order
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17

The statistics are computed by an external tool and written to
msa_root/{order}/{gene}_stats.tsv, a header line and one line of values.
They are read and passed through unchanged.
"""
import logging
import math
from pathlib import Path

import pandas as pd

from mcy_columns import GeneOrderStats

logger = logging.getLogger(__name__)

# substituted for missing or unparsable values
MISSING_INT = 0
MISSING_FLOAT = math.nan

def parse_int(value) -> int:
    if not isinstance(value, str):
        return MISSING_INT
    try:
        return int(value)
    except ValueError:
        return MISSING_INT

def parse_float(value) -> float:
    if not isinstance(value, str):
        return MISSING_FLOAT
    try:
        return float(value)
    except ValueError:
        return MISSING_FLOAT

def read_stats_file(filename: str, gene: str, order: str) -> GeneOrderStats | None:
    """Read one stats TSV

    Parameters
    ----------
    filename : str
        TSV with a header line and a line of values
    gene : str
        gene name
    order : str
        order name

    Returns
    -------
    GeneOrderStats | None
        the statistics, or None if the file has no line of values.
        Missing columns get MISSING_INT or MISSING_FLOAT.
    """
    try:
        df = pd.read_csv(filename, sep = '\t', dtype = str,
                         keep_default_na = False, index_col = False)
    except pd.errors.EmptyDataError:
        return None
    if df.empty:
        return None

    values = df.iloc[0]
    return GeneOrderStats(gene = gene, order = order,
                          polymorphic_sites = parse_int(values.get('PolymorphicSites')),
                          nucleotide_diversity = parse_float(values.get('NucleotideDiversity')),
                          tajimas_d = parse_float(values.get('TajimasD')),
                          recombination_rate = parse_float(values.get('RecombinationRate')),
                          mutation_rate_per_base = parse_float(values.get('MutationRatePerBase')))

def build_gene_order_stats(msa_root: str, genes: list[str], orders: list[str]) -> list[GeneOrderStats]:
    """Read the stats file of every gene and order that has one, genes first."""
    stats = []
    for gene in genes:
        for order in orders:
            filename = Path(msa_root) / order / f'{gene.lower()}_stats.tsv'
            if not filename.exists():
                logger.debug(f'Stats file not found: {filename}')
                continue
            stat = read_stats_file(str(filename), gene, order)
            if stat is not None:
                stats.append(stat)

    return stats
