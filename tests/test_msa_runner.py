import logging
import subprocess

import pytest

import msa_runner
from mcy_columns import MsaJob
from msa_runner import FastaValidator, MsaRunner, MuscleAligner, ToolError

JOB = MsaJob("mcya", "mcyA.fasta", ("mcyA.fasta", "adenylation.fasta"))


class StubValidator:
    def __init__(self, result=True, error=False):
        self.result = result
        self.error = error
        self.checked = []

    def validate(self, fasta):
        self.checked.append(fasta)
        if self.error:
            raise ToolError("validator missing")
        return self.result


class StubAligner:
    """Copies the input to the output."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def align(self, input_fasta, output_fasta):
        self.calls.append((input_fasta, output_fasta))
        if self.fail:
            raise ToolError("MUSCLE failed with exit code 1")
        with open(input_fasta) as f_in, open(output_fasta, "w") as f_out:
            f_out.write(f_in.read())


@pytest.fixture
def dirs(tmp_path):
    reference_dir = tmp_path / "ReferenceGenes"
    reference_dir.mkdir()
    (reference_dir / "mcyA.fasta").write_text(">ref mcyA\nACGT\n\n")
    extracted = tmp_path / "ExtractedGenes" / "Nostocales"
    extracted.mkdir(parents=True)
    (extracted / "mcyA.fasta").write_text(">q1\nAGGT\n")
    return tmp_path


def make_runner(root, aligner, validator):
    return MsaRunner(str(root / "ReferenceGenes"), str(root / "ExtractedGenes"),
                     str(root / "MSA"), aligner, validator)


def test_run_job_writes_input_and_aligns(dirs, caplog):
    aligner = StubAligner()
    runner = make_runner(dirs, aligner, StubValidator())
    with caplog.at_level(logging.WARNING):
        output = runner.run_job("Nostocales", JOB)

    msa_dir = dirs / "MSA" / "Nostocales"
    assert output == msa_dir / "mcya_aligned.fasta"
    assert (msa_dir / "mcya_msa.fasta").read_text() == ">ref mcyA\nACGT\n>q1\nAGGT\n"
    assert output.read_text() == ">ref mcyA\nACGT\n>q1\nAGGT\n"
    assert "Extracted file not found" in caplog.text
    assert "adenylation.fasta" in caplog.text


def test_invalid_input_is_not_aligned(dirs):
    aligner = StubAligner()
    runner = make_runner(dirs, aligner, StubValidator(result=False))

    assert runner.run_job("Nostocales", JOB) is None
    assert aligner.calls == []


def test_validator_error_counts_as_invalid(dirs, caplog):
    aligner = StubAligner()
    runner = make_runner(dirs, aligner, StubValidator(error=True))
    with caplog.at_level(logging.ERROR):
        assert runner.run_job("Nostocales", JOB) is None

    assert aligner.calls == []
    assert "validator missing" in caplog.text


def test_run_all_continues_after_failure(dirs):
    runner = make_runner(dirs, StubAligner(fail=True), StubValidator())
    assert runner.run_all(["Nostocales", "Chroococcales"], [JOB]) == []

    runner = make_runner(dirs, StubAligner(), StubValidator())
    aligned = runner.run_all(["Nostocales", "Chroococcales"], [JOB])
    assert [p.parent.name for p in aligned] == ["Nostocales", "Chroococcales"]
    # only the reference for an order without extracted genes
    assert aligned[1].read_text() == ">ref mcyA\nACGT\n"


def test_muscle_command(monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, 0, "", "MUSCLE v3.8\n")

    monkeypatch.setattr(msa_runner.subprocess, "run", fake_run)
    MuscleAligner("/opt/muscle", timeout=60).align("in.fasta", "out.fasta")

    cmd, kwargs = calls[0]
    assert cmd == ["/opt/muscle", "-in", "in.fasta", "-out", "out.fasta", "-maxiters", "1", "-diags1"]
    assert kwargs["timeout"] == 60


def test_muscle_failure(monkeypatch):
    monkeypatch.setattr(msa_runner.subprocess, "run",
                        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 1, "", "bad input"))
    with pytest.raises(ToolError, match="exit code 1"):
        MuscleAligner().align("in.fasta", "out.fasta")


def test_muscle_not_installed(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(msa_runner.subprocess, "run", fake_run)
    with pytest.raises(ToolError, match="Failed to start"):
        MuscleAligner("no-such-muscle").align("in.fasta", "out.fasta")


def test_muscle_timeout(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(msa_runner.subprocess, "run", fake_run)
    with pytest.raises(ToolError, match="did not finish"):
        MuscleAligner(timeout=1).align("in.fasta", "out.fasta")


def test_validator_exit_status(tmp_path, monkeypatch):
    binary = tmp_path / "ValidateFastaFile"
    binary.write_text("")
    codes = iter([0, 3])
    monkeypatch.setattr(msa_runner.subprocess, "run",
                        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, next(codes), "checked", ""))

    validator = FastaValidator(str(binary))
    assert validator.validate("a.fasta") is True
    assert validator.validate("a.fasta") is False


def test_validator_missing_binary(tmp_path):
    with pytest.raises(ToolError, match="not found"):
        FastaValidator(str(tmp_path / "missing")).validate("a.fasta")


def test_validator_found_on_path(tmp_path, monkeypatch):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    binary = bin_dir / "ValidateFastaFile"
    binary.write_text("#!/bin/sh\nexit 0\n")
    binary.chmod(0o755)
    monkeypatch.setenv("PATH", str(bin_dir))
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(msa_runner.subprocess, "run", fake_run)

    assert FastaValidator("ValidateFastaFile").validate("a.fasta") is True
    assert calls == [[str(binary), "a.fasta"]]
