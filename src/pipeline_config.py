#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
pipeline_config.py - settings for the mcy mutation pipeline
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17

Settings can be read from a YAML file. Keys left out keep their defaults, e.g.

    msa_root: /data/MSA
    orders: [Chroococcales, Nostocales]
    muscle_binary: /usr/local/bin/muscle
    jobs:
      - name: mcya
        ref_fasta: mcyA.fasta
        extracted_fasta: [mcyA.fasta, adenylation.fasta]
"""
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from mcy_columns import BASES, MsaJob

GROUP_BY_CHOICES = ('path', 'genus', 'order')

def default_jobs() -> list[MsaJob]:
    return [
        MsaJob('mcya', 'mcyA.fasta', ('mcyA.fasta', 'adenylation.fasta')),
        MsaJob('mcyb', 'mcyB.fasta', ('mcyB.fasta', 'adenylation.fasta')),
        MsaJob('mcye', 'mcyE.fasta', ('mcyE.fasta', 'aminotransferase.fasta')),
        MsaJob('mcyh', 'mcyH.fasta', ('mcyH.fasta', 'ABC transporter.fasta')),
    ]

@dataclass
class PipelineConfig:
    """
    Paths, gene and order lists, and external tools used by every pipeline step
    """
    dataset_root:       str = 'DataSet'
    reference_root:     str = 'ReferenceGenes'
    extracted_root:     str = 'ExtractedGenes'
    msa_root:           str = 'MSA'
    target_genes:       list[str] = field(default_factory = lambda: ['mcyA', 'mcyB', 'mcyE', 'mcyH',
                                                                     'adenylation', 'ABC transporter',
                                                                     'aminotransferase'])
    genes:              list[str] = field(default_factory = lambda: ['mcyA', 'mcyB', 'mcyE', 'mcyH'])
    orders:             list[str] = field(default_factory = lambda: ['Chroococcales', 'Nostocales',
                                                                     'Oscillatoriales'])
    jobs:               list[MsaJob] = field(default_factory = default_jobs)
    bases:              tuple = BASES
    muscle_binary:      str = 'muscle'
    muscle_args:        list[str] = field(default_factory = lambda: ['-maxiters', '1', '-diags1'])
    validator_binary:   str = 'ValidateFastaFile'
    tool_timeout:       float | None = None
    max_sequences:      int = 1000
    summary_group_by:   str = 'path'
    reference_headers:  dict[str, str] = field(default_factory = dict)    # job name -> header

    def __post_init__(self):
        if self.summary_group_by not in GROUP_BY_CHOICES:
            raise ValueError(f'summary_group_by must be one of {GROUP_BY_CHOICES}, not {self.summary_group_by}')
        self.bases = tuple(self.bases)
        self.jobs = [job if isinstance(job, MsaJob) else job_from_dict(job) for job in self.jobs]

    # output locations
    def aligned_fasta(self, order: str, job_name: str) -> Path:
        return Path(self.msa_root) / order / f'{job_name}_aligned.fasta'

    def summary_file(self, order: str, job_name: str) -> Path:
        return Path(self.msa_root) / order / f'{job_name}_mutation_summary.tsv'

    @property
    def matrix_dir(self) -> Path:
        return Path(self.msa_root) / 'feature_matrices'

    @property
    def onehot_dir(self) -> Path:
        return Path(self.msa_root) / 'feature_matrices_onehot'

    @property
    def stats_table(self) -> Path:
        return Path(self.msa_root) / 'plots' / 'gene_order_stats_table.tsv'

def job_from_dict(conf: dict) -> MsaJob:
    try:
        return MsaJob(name = conf['name'], ref_fasta = conf['ref_fasta'],
                      extracted_fasta = tuple(conf.get('extracted_fasta', ())))
    except (KeyError, TypeError) as e:
        raise ValueError(f'Invalid MSA job: {conf}') from e

def config_from_dict(conf: dict | None) -> PipelineConfig:
    """Make a PipelineConfig from a dictionary. Unknown keys are an error."""
    if conf is None:
        return PipelineConfig()
    if not isinstance(conf, dict):
        raise ValueError('Configuration must be a mapping.')

    known = {f.name for f in fields(PipelineConfig)}
    unknown = set(conf) - known
    if unknown:
        raise ValueError(f'Unknown configuration keys: {sorted(unknown)}')

    return PipelineConfig(**conf)

def load_config(filename: str) -> PipelineConfig:
    """Read a YAML configuration file

    Raises
    ------
    OSError
        if the file can't be read
    ValueError
        if the file is not valid YAML or has unknown or invalid keys
    """
    with open(filename, 'r') as f:
        try:
            conf = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f'Could not parse {filename}: {e}') from e

    return config_from_dict(conf)
