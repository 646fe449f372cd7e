#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
gene_extraction.py - pull target genes out of cds_from_genomic.fna files
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17
"""
import logging
import re
from pathlib import Path

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

logger = logging.getLogger(__name__)

CDS_FILE = 'cds_from_genomic.fna'

class GeneSequences:
    """
    Extracted sequences, grouped by dataset group (order) and gene.
    Group and gene names are case insensitive; the first spelling seen is kept.
    """
    def __init__(self):
        self._groups: dict[str, dict[str, list[tuple[str, str]]]] = dict()
        # lower case name -> first spelling, kept apart for groups and genes
        self._group_names: dict[str, str] = dict()
        self._gene_names: dict[str, str] = dict()

    def add(self, group: str, gene: str, header: str, sequence: str) -> None:
        group = self._group_names.setdefault(group.lower(), group)
        gene = self._gene_names.setdefault(gene.lower(), gene)
        self._groups.setdefault(group, dict()).setdefault(gene, []).append((header, sequence))

    def merge(self, other: 'GeneSequences') -> None:
        for group, gene, entries in other.items():
            for header, sequence in entries:
                self.add(group, gene, header, sequence)

    def items(self):
        """Yield (group, gene, [(header, sequence), ...]) in insertion order."""
        for group, genes in self._groups.items():
            for gene, entries in genes.items():
                yield (group, gene, entries)

    def get(self, group: str, gene: str) -> list[tuple[str, str]]:
        genes = self._groups.get(self._group_names.get(group.lower(), group), dict())
        return genes.get(self._gene_names.get(gene.lower(), gene), [])

    def __len__(self) -> int:
        return sum(len(entries) for _, _, entries in self.items())

def match_gene(header: str, target_genes: list[str]) -> str | None:
    """Find the first target gene named in a CDS header

    Parameters
    ----------
    header : str
        FASTA header, e.g. lcl|CP073041.1_cds_UXE61484.1_33 [gene=mcyA] [protein=...]
    target_genes : list[str]
        genes to look for

    Returns
    -------
    str | None
        the target gene if the header has [gene=<gene>] or a
        [protein=...] containing the gene name, otherwise None
    """
    for gene in target_genes:
        escaped = re.escape(gene)
        if re.search(rf'\[gene\s*=\s*{escaped}\]', header, re.IGNORECASE) or \
           re.search(rf'\[protein\s*=\s*[^\]]*{escaped}[^\]]*\]', header, re.IGNORECASE):
            return gene

    return None

def extract_protein_name(header: str) -> str:
    """The [protein=...] value of a header, or the whole header."""
    match = re.search(r'\[protein\s*=\s*([^\]]+)\]', header, re.IGNORECASE)
    return match.group(1).strip() if match else header

def extract_genes_from_fasta(group: str, filename: str, target_genes: list[str],
                             gene_seqs: GeneSequences) -> None:
    """Add the target gene records of a CDS FASTA file to gene_seqs

    Note: gene_seqs is altered by this function
    """
    for record in SeqIO.parse(filename, 'fasta'):
        header = record.description.strip()
        gene = match_gene(header, target_genes)
        if gene is not None:
            gene_seqs.add(group, gene, header, str(record.seq))

def traverse_group(group: str, group_dir: str, target_genes: list[str]) -> GeneSequences:
    """Extract target genes from every CDS file below group_dir

    Only subdirectories are searched, not group_dir itself.
    """
    gene_seqs = GeneSequences()
    root = Path(group_dir)
    for cds_file in sorted(root.rglob(CDS_FILE)):
        if cds_file.parent == root or not cds_file.is_file():
            continue
        logger.debug(f'Reading {cds_file}')
        extract_genes_from_fasta(group, str(cds_file), target_genes, gene_seqs)

    return gene_seqs

def write_fasta_unique(filename: str, entries: list[tuple[str, str]], max_sequences: int = 1000) -> int:
    """Write sequences to a FASTA file, one per protein name

    Parameters
    ----------
    filename : str
        output FASTA
    entries : list[tuple[str, str]]
        (header, sequence) tuples
    max_sequences : int, optional
        stop after this many records, by default 1000

    Returns
    -------
    int
        number of records written
    """
    seen = set()
    records = []
    for header, seq in entries:
        if len(records) >= max_sequences:
            break
        protein_name = extract_protein_name(header)
        if protein_name.lower() in seen:
            logger.warning(f'Duplicate protein name found: {protein_name}, skipping.')
            continue
        seen.add(protein_name.lower())
        seq_id = header.split(None, 1)[0] if header.strip() else ''
        records.append(SeqRecord(Seq(seq), id = seq_id, description = header))

    with open(filename, 'w') as f:
        SeqIO.write(records, f, 'fasta')

    return len(records)

def write_gene_fastas(gene_seqs: GeneSequences, output_root: str, max_sequences: int = 1000) -> list[Path]:
    """Write output_root/{group}/{gene}.fasta for each group and gene."""
    written = []
    for group, gene, entries in gene_seqs.items():
        out_dir = Path(output_root) / group
        out_dir.mkdir(parents = True, exist_ok = True)
        out_file = out_dir / f'{gene}.fasta'
        count = write_fasta_unique(str(out_file), entries, max_sequences)
        logger.info(f'[{group}] {gene}: {count} sequences saved to {out_file}')
        written.append(out_file)

    return written
