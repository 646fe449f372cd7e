#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
msa_runner.py - build MSA input files, validate them, and align them
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17

The aligner and the validator are external programs run with subprocess.
Anything with the same align() / validate() methods can be passed to MsaRunner.
"""
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from mcy_columns import MsaJob

logger = logging.getLogger(__name__)

class ToolError(RuntimeError):
    """An external program could not be run or exited with an error."""

class Aligner(Protocol):
    def align(self, input_fasta: str, output_fasta: str) -> None: ...

class Validator(Protocol):
    def validate(self, fasta: str) -> bool: ...

def run_tool(cmd: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
    """Run an external program and capture its output

    Parameters
    ----------
    cmd : list[str]
        program and arguments
    timeout : float | None, optional
        seconds to wait, by default wait forever

    Returns
    -------
    subprocess.CompletedProcess
        the finished process

    Raises
    ------
    ToolError
        if the program can't be started or does not finish in time
    """
    logger.debug(f"Command: {' '.join(cmd)}")
    try:
        return subprocess.run(cmd, capture_output = True, text = True, timeout = timeout)
    except OSError as e:
        raise ToolError(f'Failed to start {cmd[0]}: {e}') from e
    except subprocess.TimeoutExpired as e:
        raise ToolError(f'{cmd[0]} did not finish in {timeout} seconds') from e

class MuscleAligner:
    """
    Align a FASTA file with MUSCLE 3 style arguments
    """
    def __init__(self, binary: str = 'muscle', extra_args: list[str] | None = None,
                 timeout: float | None = None):
        self.binary = binary
        self.extra_args = list(extra_args) if extra_args is not None else ['-maxiters', '1', '-diags1']
        self.timeout = timeout

    def align(self, input_fasta: str, output_fasta: str) -> None:
        cmd = [self.binary, '-in', input_fasta, '-out', output_fasta] + self.extra_args
        result = run_tool(cmd, self.timeout)

        # MUSCLE writes progress to stderr
        if result.stderr and result.stderr.strip():
            logger.debug(f'MUSCLE stderr: {result.stderr.strip()}')
        if result.returncode != 0:
            raise ToolError(f'MUSCLE failed with exit code {result.returncode}: {result.stderr.strip()}')

class FastaValidator:
    """
    Check a FASTA file with an external validator. Exit code 0 means valid.
    """
    def __init__(self, binary: str, timeout: float | None = None):
        self.binary = binary
        self.timeout = timeout

    def validate(self, fasta: str) -> bool:
        # a bare command name is looked up on PATH
        binary = shutil.which(self.binary)
        if binary is None and Path(self.binary).exists():
            binary = self.binary
        if binary is None:
            raise ToolError(f'Validation tool not found at {self.binary}')

        result = run_tool([binary, fasta], self.timeout)
        if result.stdout and result.stdout.strip():
            logger.info(result.stdout.strip())
        if result.stderr and result.stderr.strip():
            logger.warning(result.stderr.strip())

        return result.returncode == 0

class MsaRunner:
    """
    Concatenate reference and extracted gene FASTAs for each order and job,
    validate the result, and align it.
    """
    def __init__(self, reference_dir: str, extracted_root: str, msa_root: str,
                 aligner: Aligner, validator: Validator):
        self.reference_dir = Path(reference_dir)
        self.extracted_root = Path(extracted_root)
        self.msa_root = Path(msa_root)
        self.aligner = aligner
        self.validator = validator
        self.msa_root.mkdir(parents = True, exist_ok = True)

    def write_msa_input(self, job: MsaJob, extracted_dir: Path, msa_input: Path) -> None:
        """Write the reference FASTA followed by the job's extracted FASTAs. Missing files are skipped."""
        sources = [self.reference_dir / job.ref_fasta] + \
                  [extracted_dir / name for name in job.extracted_fasta]

        with open(msa_input, 'w') as out:
            for i, source in enumerate(sources):
                if not source.exists():
                    kind = 'Reference' if i == 0 else 'Extracted'
                    logger.warning(f'{kind} file not found: {source}')
                    continue
                out.write(source.read_text().rstrip() + '\n')

    def is_valid(self, msa_input: Path) -> bool:
        try:
            return self.validator.validate(str(msa_input))
        except ToolError as e:
            logger.error(str(e))
            return False

    def run_job(self, order: str, job: MsaJob) -> Path | None:
        """Run one alignment

        Returns
        -------
        Path | None
            the aligned FASTA, or None if the input was invalid or alignment failed
        """
        msa_dir = self.msa_root / order
        msa_dir.mkdir(parents = True, exist_ok = True)
        msa_input = msa_dir / f'{job.name}_msa.fasta'
        msa_output = msa_dir / f'{job.name}_aligned.fasta'

        self.write_msa_input(job, self.extracted_root / order, msa_input)

        if not self.is_valid(msa_input):
            logger.warning(f'Invalid FASTA format in {msa_input}. Skipping alignment.')
            return None

        try:
            self.aligner.align(str(msa_input), str(msa_output))
        except ToolError as e:
            logger.error(f'[{order}] {job.name}: {e}')
            return None

        logger.info(f'[{order}] MSA complete: {msa_output}')
        return msa_output

    def run_all(self, orders: list[str], jobs: list[MsaJob]) -> list[Path]:
        """Run every job for every order. Returns the aligned files that were written."""
        aligned = []
        for order in orders:
            for job in jobs:
                output = self.run_job(order, job)
                if output is not None:
                    aligned.append(output)

        return aligned
