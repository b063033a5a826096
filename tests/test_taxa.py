import pytest

from nexusfmt.blocks.taxa import (
    SetFormat,
    TaxaBlock,
    TaxPartition,
    TaxSet,
    new_block,
)
from nexusfmt.core import Core, get_block
from nexusfmt.scanner import NexusSyntaxError, Scanner


def _parse(text: str) -> TaxaBlock:
    block = TaxaBlock()
    block.parse(Scanner(text))
    return block


def test_parse_valid_basic_block():
    tb = _parse(
        """TITLE 'My Taxa';
        DIMENSIONS NTAX=3;
        TAXLABELS frog toad 'tree frog';
        END;"""
    )
    assert tb.title == "My Taxa"
    assert tb.dimensions == 3
    assert len(tb.tax_labels) == 3
    assert tb.tax_labels[2] == "tree frog"


def test_parse_sets_and_partitions():
    tb = _parse(
        """DIMENSIONS NTAX=4;
        TAXLABELS t1 t2 t3 t4;
        TAXSET set1 = t1 t2;
        TAXPARTITION part1 = p1:t1 t2, p2:t3 t4;
        ENDBLOCK;"""
    )
    assert len(tb.tax_sets) == 1
    assert len(tb.tax_partitions) == 1
    assert tb.tax_sets["set1"] == TaxSet(SetFormat.STANDARD, ["t1", "t2"])
    assert tb.tax_partitions["part1"].subsets == {
        "p1": ["t1", "t2"],
        "p2": ["t3", "t4"],
    }


def test_parse_vector_set_and_partition():
    tb = _parse(
        """DIMENSIONS NTAX=4;
        TAXLABELS t1 t2 t3 t4;
        TAXSET vset (VECTOR) = 1 1 0 0;
        TAXPARTITION vpart (VECTOR) = A A B B;
        END;"""
    )
    assert tb.tax_sets["vset"] == TaxSet(SetFormat.VECTOR, ["1", "1", "0", "0"])
    assert tb.tax_partitions["vpart"] == TaxPartition(
        SetFormat.VECTOR, {"VECTOR_DATA": ["A", "A", "B", "B"]}
    )


@pytest.mark.parametrize(
    "text, message",
    [
        (
            "TAXLABELS t1 t2;\nDIMENSIONS NTAX=2;\nEND;",
            "DIMENSIONS must be defined before TAXLABELS",
        ),
        ("DIMENSIONS NTAX=2;\nTAXLABELS t1 t2 t3;\nEND;", "dimension mismatch"),
        ("DIMENSIONS NTAX=4;\nTAXLABELS t1 t2 t3;\nEND;", "dimension mismatch"),
        ("DIMENSIONS NTAX=-5;\nTAXLABELS t1;\nEND;", "positive integer"),
        (
            "DIMENSIONS NTAX=2;\nDIMENSIONS NTAX=2;\nTAXLABELS t1 t2;\nEND;",
            "DIMENSIONS command can only appear once",
        ),
        (
            "DIMENSIONS NTAX=2;\nTAXLABELS t1 123;\nEND;",
            "cannot consist entirely of digits",
        ),
        ("DIMENSIONS NTAX=3;\nTAXLABELS frog toad frog;\nEND;", "duplicate taxon name"),
        ("DIMENSIONS NTAX=2;\nTAXLABELS frog FROG;\nEND;", "duplicate taxon name"),
        (
            "DIMENSIONS NTAX=2;\nTAXLABELS tree_frog 'tree frog';\nEND;",
            "duplicate taxon name",
        ),
    ],
)
def test_parse_errors(text, message):
    with pytest.raises(NexusSyntaxError, match=message):
        _parse(text)


def test_parse_dimensions_without_ntax():
    with pytest.raises(NexusSyntaxError, match="NTAX parameter"):
        _parse("DIMENSIONS NCHAR=2;\nEND;")


def test_parse_taxset_without_equals():
    with pytest.raises(NexusSyntaxError, match="expected '='"):
        _parse("TAXSET set1 t1 t2;\nEND;")


def _block(**attrs) -> TaxaBlock:
    block = TaxaBlock()
    for key, value in attrs.items():
        setattr(block, key, value)
    return block


@pytest.mark.parametrize(
    "block, expected",
    [
        (
            _block(dimensions=3, tax_labels=["frog", "toad", "tree frog"]),
            "BEGIN TAXA;\n\tDIMENSIONS NTAX=3;\n\tTAXLABELS\n\t\tfrog\n\t\ttoad\n"
            "\t\t'tree frog'\n\t;\nEND;",
        ),
        (
            _block(title="My Taxa", dimensions=2, tax_labels=["A", "B"]),
            "BEGIN TAXA;\n\tTITLE 'My Taxa';\n\tDIMENSIONS NTAX=2;\n\tTAXLABELS\n"
            "\t\tA\n\t\tB\n\t;\nEND;",
        ),
        (
            _block(
                dimensions=4,
                tax_labels=["t1", "t2", "t3", "t4"],
                tax_sets={"set1": TaxSet(SetFormat.STANDARD, ["t1", "t2"])},
            ),
            "BEGIN TAXA;\n\tDIMENSIONS NTAX=4;\n\tTAXLABELS\n\t\tt1\n\t\tt2\n"
            "\t\tt3\n\t\tt4\n\t;\n\tTAXSET set1 = t1 t2;\nEND;",
        ),
        (
            _block(
                dimensions=4,
                tax_labels=["t1", "t2", "t3", "t4"],
                tax_sets={"vset": TaxSet(SetFormat.VECTOR, ["1", "1", "0", "0"])},
            ),
            "BEGIN TAXA;\n\tDIMENSIONS NTAX=4;\n\tTAXLABELS\n\t\tt1\n\t\tt2\n"
            "\t\tt3\n\t\tt4\n\t;\n\tTAXSET vset (VECTOR) = 1 1 0 0;\nEND;",
        ),
        (
            _block(
                dimensions=4,
                tax_labels=["t1", "t2", "t3", "t4"],
                tax_partitions={
                    "part1": TaxPartition(SetFormat.STANDARD, {"subA": ["t1", "t2"]})
                },
            ),
            "BEGIN TAXA;\n\tDIMENSIONS NTAX=4;\n\tTAXLABELS\n\t\tt1\n\t\tt2\n"
            "\t\tt3\n\t\tt4\n\t;\n\tTAXPARTITION part1 =subA: t1 t2;\nEND;",
        ),
        (
            _block(
                dimensions=4,
                tax_labels=["t1", "t2", "t3", "t4"],
                tax_partitions={
                    "vpart": TaxPartition(
                        SetFormat.VECTOR, {"VECTOR_DATA": ["A", "A", "B", "B"]}
                    )
                },
            ),
            "BEGIN TAXA;\n\tDIMENSIONS NTAX=4;\n\tTAXLABELS\n\t\tt1\n\t\tt2\n"
            "\t\tt3\n\t\tt4\n\t;\n\tTAXPARTITION vpart (VECTOR) = A A B B;\nEND;",
        ),
    ],
)
def test_render(block, expected):
    assert block.render().strip() == expected.strip()


def test_render_then_parse_round_trip():
    original = _block(
        title="My Taxa",
        dimensions=3,
        tax_labels=["frog", "toad", "tree frog"],
        tax_sets={"set1": TaxSet(SetFormat.STANDARD, ["frog", "toad"])},
        tax_partitions={
            "part1": TaxPartition(
                SetFormat.STANDARD, {"subA": ["frog"], "subB": ["toad"]}
            )
        },
    )
    scanner = Scanner(original.render())
    assert [scanner.next_token() for _ in range(3)] == ["BEGIN", "TAXA", ";"]
    parsed = TaxaBlock()
    parsed.parse(scanner)
    assert parsed.title == original.title
    assert parsed.tax_labels == original.tax_labels
    assert parsed.tax_sets == original.tax_sets
    assert parsed.tax_partitions == original.tax_partitions


def test_add_and_contains_taxon():
    tb = TaxaBlock()
    tb.add_taxon("frog")
    tb.add_taxon("toad")
    assert tb.tax_labels == ["frog", "toad"]
    assert tb.dimensions == 2
    assert tb.contains_taxon("FROG")
    assert not tb.contains_taxon("snake")


def test_add_taxon_rejects_duplicates_and_digits():
    tb = TaxaBlock()
    tb.add_taxon("frog")
    with pytest.raises(ValueError, match="already exists"):
        tb.add_taxon("Frog")
    with pytest.raises(ValueError, match="entirely of digits"):
        tb.add_taxon("42")
    assert tb.tax_labels == ["frog"]


def test_remove_taxon():
    tb = TaxaBlock()
    tb.add_taxon("frog")
    tb.add_taxon("toad")
    tb.remove_taxon("FROG")
    assert tb.tax_labels == ["toad"]
    assert tb.dimensions == 1
    with pytest.raises(KeyError):
        tb.remove_taxon("frog")


def test_tax_set_management():
    tb = TaxaBlock()
    tb.add_taxon("frog")
    tb.add_taxon("toad")
    tb.add_tax_set("amphibians", SetFormat.STANDARD, ["frog", "toad"])
    assert tb.tax_sets["amphibians"].taxa_list == ["frog", "toad"]
    with pytest.raises(ValueError, match="does not exist"):
        tb.add_tax_set("bad", SetFormat.STANDARD, ["snake"])
    assert "bad" not in tb.tax_sets
    tb.remove_tax_set("amphibians")
    assert tb.tax_sets == {}
    with pytest.raises(KeyError):
        tb.remove_tax_set("amphibians")


def test_tax_partition_management():
    tb = TaxaBlock()
    tb.add_tax_partition("clades", SetFormat.STANDARD, {"a": ["frog"]})
    assert tb.tax_partitions["clades"].subsets == {"a": ["frog"]}
    tb.remove_tax_partition("clades")
    assert tb.tax_partitions == {}
    with pytest.raises(KeyError):
        tb.remove_tax_partition("clades")


def test_new_block_appends_to_core():
    core = Core()
    block = new_block(core)
    assert core.blocks == [block]
    assert block.name == "TAXA"
    assert get_block(core, TaxaBlock) is block