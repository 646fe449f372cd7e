import logging

from gene_extraction import (GeneSequences, extract_protein_name, match_gene, traverse_group,
                             write_fasta_unique, write_gene_fastas)
from pipeline_config import PipelineConfig

TARGETS = PipelineConfig().target_genes

CDS = (
    ">lcl|CP1.1_cds_1 [gene=mcyA] [protein=microcystin synthetase A]\n"
    "ATGAAACCC\n"
    "GGG\n"
    ">lcl|CP1.1_cds_2 [protein=ABC transporter ATP-binding protein]\n"
    "ATGTTT\n"
    ">lcl|CP1.1_cds_3 [gene=rbcL] [protein=ribulose bisphosphate carboxylase]\n"
    "ATGCCC\n"
)


def test_match_gene():
    assert match_gene("x [gene=MCYA] [protein=foo]", TARGETS) == "mcyA"
    assert match_gene("x [gene = mcyE]", TARGETS) == "mcyE"
    assert match_gene("x [protein=putative adenylation domain protein]", TARGETS) == "adenylation"
    assert match_gene("x [gene=mcyAB]", TARGETS) is None
    assert match_gene("mcyA without tags", TARGETS) is None


def test_first_target_wins():
    header = "x [gene=mcyB] [protein=mcyA-like]"
    assert match_gene(header, TARGETS) == "mcyA"


def test_extract_protein_name():
    assert extract_protein_name("x [protein= ABC transporter ]") == "ABC transporter"
    assert extract_protein_name("no protein tag") == "no protein tag"


def test_traverse_group_searches_subdirectories(tmp_path):
    group_dir = tmp_path / "Nostocales"
    (group_dir / "GCF_000001" / "ncbi").mkdir(parents=True)
    (group_dir / "GCF_000001" / "ncbi" / "cds_from_genomic.fna").write_text(CDS)
    # files directly in the group directory are not read
    (group_dir / "cds_from_genomic.fna").write_text(CDS)

    gene_seqs = traverse_group("Nostocales", str(group_dir), TARGETS)

    assert len(gene_seqs) == 2
    mcya = gene_seqs.get("Nostocales", "mcyA")
    assert mcya == [("lcl|CP1.1_cds_1 [gene=mcyA] [protein=microcystin synthetase A]", "ATGAAACCCGGG")]
    assert len(gene_seqs.get("nostocales", "abc transporter")) == 1


def test_gene_sequences_merge():
    a = GeneSequences()
    a.add("Nostocales", "mcyA", "h1", "AAA")
    b = GeneSequences()
    b.add("NOSTOCALES", "MCYA", "h2", "CCC")
    b.add("ReferenceGenes", "mcyA", "h3", "GGG")
    a.merge(b)

    assert [(group, gene, len(entries)) for group, gene, entries in a.items()] == [
        ("Nostocales", "mcyA", 2),
        ("ReferenceGenes", "mcyA", 1),
    ]


def test_group_and_gene_spellings_are_separate():
    gene_seqs = GeneSequences()
    gene_seqs.add("mcyA", "MCYA", "h1", "AAA")
    gene_seqs.add("MCYA", "mcyA", "h2", "CCC")

    assert [(group, gene, len(entries)) for group, gene, entries in gene_seqs.items()] == [
        ("mcyA", "MCYA", 2),
    ]
    assert len(gene_seqs.get("MCYA", "mcya")) == 2


def test_write_fasta_unique(tmp_path, caplog):
    seq = "A" * 70
    entries = [
        ("h1 [protein=McyA]", seq),
        ("h2 [protein=mcya]", "CCCC"),
        ("h3 [protein=McyB]", "GGGG"),
        ("h4 [protein=McyC]", "TTTT"),
    ]
    out = tmp_path / "mcyA.fasta"
    with caplog.at_level(logging.WARNING):
        count = write_fasta_unique(str(out), entries, max_sequences=2)

    assert count == 2
    assert out.read_text() == (
        ">h1 [protein=McyA]\n" + "A" * 60 + "\n" + "A" * 10 + "\n"
        ">h3 [protein=McyB]\nGGGG\n"
    )
    assert "Duplicate protein name found: mcya" in caplog.text


def test_write_gene_fastas(tmp_path):
    gene_seqs = GeneSequences()
    gene_seqs.add("Nostocales", "ABC transporter", "h1", "ATG")
    gene_seqs.add("Chroococcales", "mcyE", "h2", "ATG")

    written = write_gene_fastas(gene_seqs, str(tmp_path))

    assert written == [tmp_path / "Nostocales" / "ABC transporter.fasta",
                       tmp_path / "Chroococcales" / "mcyE.fasta"]
    assert (tmp_path / "Chroococcales" / "mcyE.fasta").read_text() == ">h2\nATG\n"
