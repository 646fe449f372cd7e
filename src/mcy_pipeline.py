#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
mcy_pipeline.py - the steps of the mcy mutation pipeline
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17

Steps run in this order:
    extract         pull target genes from the genome dataset
    align           build, validate and align MSA input files
    summary         per sequence and per group mutation counts
    matrices        binary mutation matrices
    onehot          one-hot base matrices
    types           mutation type counts for each gene and order
    matrix_summary  percent mutated positions from the binary matrices
    stats           gene/order population genetics table
A missing input skips that unit of work. Only a missing dataset root stops the run.
"""
import logging
from pathlib import Path

from aligned_fasta import get_reference_header, read_aligned_fasta
from gene_extraction import GeneSequences, traverse_group, write_gene_fastas
from gene_order_stats import build_gene_order_stats
from msa_runner import Aligner, FastaValidator, MsaRunner, MuscleAligner, Validator
from mutation_matrix import (build_mutation_matrix, build_onehot_matrix,
                             count_mutation_types, summarize_matrix_directory)
from mutation_summary import (ReferenceNotFoundError, extract_genus, extract_order,
                              order_from_path, summarize_mutations)
from pipeline_config import PipelineConfig
from report_writer import (write_gene_order_stats, write_matrix_csv, write_matrix_summary,
                           write_mutation_summary, write_mutation_type_summary)

logger = logging.getLogger(__name__)

STEPS = ('extract', 'align', 'summary', 'matrices', 'onehot', 'types', 'matrix_summary', 'stats')
REFERENCE_GROUP = 'ReferenceGenes'

class MissingDatasetError(FileNotFoundError):
    """The genome dataset directory does not exist."""

def extract_genes(config: PipelineConfig) -> GeneSequences:
    """Extract target genes for every order directory in the dataset and write one FASTA per gene

    Raises
    ------
    MissingDatasetError
        if config.dataset_root does not exist
    """
    root = Path(config.dataset_root)
    if not root.is_dir():
        raise MissingDatasetError(f'DataSet directory not found at: {root}')

    gene_seqs = GeneSequences()
    for group_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        gene_seqs.merge(traverse_group(group_dir.name, str(group_dir), config.target_genes))

    if Path(config.reference_root).is_dir():
        gene_seqs.merge(traverse_group(REFERENCE_GROUP, config.reference_root, config.target_genes))

    write_gene_fastas(gene_seqs, config.extracted_root, config.max_sequences)
    return gene_seqs

def align_genes(config: PipelineConfig,
                aligner: Aligner | None = None,
                validator: Validator | None = None) -> list[Path]:
    if aligner is None:
        aligner = MuscleAligner(config.muscle_binary, config.muscle_args, config.tool_timeout)
    if validator is None:
        validator = FastaValidator(config.validator_binary, config.tool_timeout)

    runner = MsaRunner(config.reference_root, config.extracted_root, config.msa_root,
                       aligner, validator)
    return runner.run_all(config.orders, config.jobs)

def _group_func(config: PipelineConfig, aligned: Path):
    if config.summary_group_by == 'genus':
        return ('Genus', extract_genus)
    if config.summary_group_by == 'order':
        return ('Order', extract_order)
    order = order_from_path(str(aligned))
    return ('Order', lambda header: order)

def summarize_alignments(config: PipelineConfig) -> list[Path]:
    """Write a mutation summary TSV for every order and job that has an alignment."""
    written = []
    for order in config.orders:
        for job in config.jobs:
            aligned = config.aligned_fasta(order, job.name)
            if not aligned.exists():
                logger.warning(f'Alignment file not found: {aligned}')
                continue

            reference_header = config.reference_headers.get(job.name) or get_reference_header(str(aligned))
            if reference_header is None:
                logger.warning(f'No sequences in {aligned}')
                continue

            label, group_func = _group_func(config, aligned)
            try:
                per_sequence, groups = summarize_mutations(read_aligned_fasta(str(aligned)),
                                                           reference_header, group_func)
            except ReferenceNotFoundError as e:
                logger.warning(f'{aligned}: {e.args[0]}')
                continue

            summary = config.summary_file(order, job.name)
            write_mutation_summary(per_sequence, groups, label, str(summary))
            logger.info(f'Mutation summary by {label.lower()} written to {summary}')
            written.append(summary)

    return written

def _gene_alignments(config: PipelineConfig):
    """Yield (gene, order, aligned sequences) for each gene and order with an alignment file."""
    for gene in config.genes:
        for order in config.orders:
            aligned = config.aligned_fasta(order, gene.lower())
            if not aligned.exists():
                logger.warning(f'File not found: {aligned}')
                continue
            yield (gene, order, read_aligned_fasta(str(aligned)))

def build_feature_matrices(config: PipelineConfig) -> list[Path]:
    config.matrix_dir.mkdir(parents = True, exist_ok = True)
    written = []
    for gene, order, seqs in _gene_alignments(config):
        result = build_mutation_matrix(seqs)
        if result is None:
            continue
        out_file = config.matrix_dir / f'{order}_{gene}_mutation_matrix.csv'
        write_matrix_csv(*result, str(out_file))
        logger.info(f'Saved: {out_file}')
        written.append(out_file)

    return written

def build_onehot_matrices(config: PipelineConfig) -> list[Path]:
    config.onehot_dir.mkdir(parents = True, exist_ok = True)
    written = []
    for gene, order, seqs in _gene_alignments(config):
        result = build_onehot_matrix(seqs, config.bases)
        if result is None:
            continue
        out_file = config.onehot_dir / f'{order}_{gene}_onehot_matrix.csv'
        write_matrix_csv(*result, str(out_file))
        logger.info(f'Saved: {out_file}')
        written.append(out_file)

    return written

def build_mutation_type_summary(config: PipelineConfig) -> Path:
    type_counts = [count_mutation_types(seqs, gene, order)
                   for gene, order, seqs in _gene_alignments(config)
                   if seqs]

    config.matrix_dir.mkdir(parents = True, exist_ok = True)
    out_file = config.matrix_dir / 'mutation_type_summary.csv'
    write_mutation_type_summary(type_counts, str(out_file))
    logger.info(f'Mutation type summary written to: {out_file}')
    return out_file

def build_matrix_summary(config: PipelineConfig) -> Path | None:
    if not config.matrix_dir.is_dir():
        logger.warning(f'Matrix directory not found: {config.matrix_dir}')
        return None

    out_file = config.matrix_dir / 'mutation_matrix_summary.csv'
    write_matrix_summary(summarize_matrix_directory(str(config.matrix_dir)), str(out_file))
    logger.info(f'Summary written to: {out_file}')
    return out_file

def build_stats_table(config: PipelineConfig) -> Path:
    stats = build_gene_order_stats(config.msa_root, config.genes, config.orders)
    config.stats_table.parent.mkdir(parents = True, exist_ok = True)
    write_gene_order_stats(stats, str(config.stats_table))
    logger.info(f'Gene-order stats table written to {config.stats_table}')
    return config.stats_table

def run_pipeline(config: PipelineConfig,
                 steps: list[str] | tuple[str, ...] = STEPS,
                 aligner: Aligner | None = None,
                 validator: Validator | None = None) -> None:
    """Run the requested steps in pipeline order

    Parameters
    ----------
    config : PipelineConfig
        settings
    steps : list[str] | tuple[str, ...], optional
        names from STEPS, by default all of them
    aligner : Aligner | None, optional
        replaces the MUSCLE aligner
    validator : Validator | None, optional
        replaces the external FASTA validator

    Raises
    ------
    ValueError
        for an unknown step name
    MissingDatasetError
        if the extract step runs and the dataset directory is missing
    """
    unknown = set(steps) - set(STEPS)
    if unknown:
        raise ValueError(f'Unknown steps: {sorted(unknown)}. Available: {list(STEPS)}')

    for step in STEPS:
        if step not in steps:
            continue
        logger.info(f'--- {step} ---')
        if step == 'extract':
            extract_genes(config)
        elif step == 'align':
            align_genes(config, aligner, validator)
        elif step == 'summary':
            summarize_alignments(config)
        elif step == 'matrices':
            build_feature_matrices(config)
        elif step == 'onehot':
            build_onehot_matrices(config)
        elif step == 'types':
            build_mutation_type_summary(config)
        elif step == 'matrix_summary':
            build_matrix_summary(config)
        elif step == 'stats':
            build_stats_table(config)
