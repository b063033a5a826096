import pytest

from nexusfmt.blocks.characters.model import DataType, StateType
from nexusfmt.exports.xread import CharLabel, Exporter, Row, Variant
from nexusfmt.nexus import Nexus


@pytest.fixture
def nex():
    n = Nexus()
    cb = n.new_characters_block(DataType.STANDARD)
    cb.title = "Morphology"
    c1 = cb.matrix.add_character("Eye_Color", "Blue", "Brown")
    c2 = cb.matrix.add_character("", "Present", "Absent")
    t1 = cb.matrix.add_taxon("Species_A")
    t2 = cb.matrix.add_taxon("Species B")
    t1.set_state(c1, StateType.SINGLE, "Blue")
    t1.set_state(c2, StateType.MISSING)
    t2.set_state(c1, StateType.POLYMORPHIC, "Blue", "Brown")
    t2.set_state(c2, StateType.SINGLE, "Absent")
    return n


def test_nona_export(nex):
    out = (
        Exporter(nex, Variant.NONA)
        .set_project("Test Project")
        .set_author("Test Author")
        .render()
    )
    assert "Project: Test Project" in out
    assert "Author: Test Author" in out
    assert "xread" in out
    assert "'Morphology'" in out
    assert "2 2" in out
    assert "Species_A 0?" in out
    assert "Species_B [01]1" in out
    assert "cnames" in out
    assert "{ 0 Eye_Color Blue Brown ;" in out
    assert "{ 1 Char_1 Present Absent ;" in out
    assert "taxname=;" not in out


def test_tnt_export(nex):
    out = (
        Exporter(nex, Variant.TNT)
        .set_taxname(True)
        .add_command("nstates 32;")
        .add_command("rseed 0;")
        .render()
    )
    assert "taxname=;" in out
    assert "nstates 32;" in out
    assert "rseed 0;" in out
    assert out.index("taxname=;") < out.index("xread")
    assert out.index("rseed 0;") < out.index("xread")
    assert "2 2" in out
    assert "cnames" in out


def test_tnt_taxname_default_and_toggle(nex):
    assert Exporter(nex, Variant.TNT).use_taxname is True
    assert Exporter(nex, Variant.NONA).use_taxname is False
    out = Exporter(nex, Variant.TNT).set_taxname(False).render()
    assert "taxname=;" not in out


def test_no_labels_hides_cnames():
    n = Nexus()
    cb = n.new_characters_block(DataType.STANDARD)
    cb.matrix.add_character("")
    t1 = cb.matrix.add_taxon("TaxonA")
    t1.set_state(cb.matrix.characters[0], StateType.MISSING)
    exporter = Exporter(n, Variant.NONA)
    assert exporter.has_labels() is False
    assert "cnames" not in exporter.render()


def test_rows_and_dimensions(nex):
    exporter = Exporter(nex, Variant.NONA)
    assert exporter.nchar() == 2
    assert exporter.ntax() == 2
    assert exporter.title() == "Morphology"
    assert exporter.rows() == [Row("Species_A", "0?"), Row("Species_B", "[01]1")]


def test_rows_pad_names_and_render_gaps():
    n = Nexus()
    cb = n.new_characters_block(DataType.DNA)
    c1 = cb.matrix.add_character("")
    a = cb.matrix.add_taxon("a")
    longer = cb.matrix.add_taxon("long name")
    a.set_state(c1, StateType.GAP)
    longer.set_state(c1, StateType.UNCERTAIN, "A", "C")
    assert Exporter(n, Variant.NONA).rows() == [
        Row("a        ", "-"),
        Row("long_name", "[AC]"),
    ]


def test_characters_labels(nex):
    assert Exporter(nex, Variant.NONA).characters() == [
        CharLabel(0, "Eye_Color", ["Blue", "Brown"]),
        CharLabel(1, "Char_1", ["Present", "Absent"]),
    ]


def test_without_characters_block():
    exporter = Exporter(Nexus(), Variant.NONA)
    assert exporter.title() == ""
    assert exporter.nchar() == 0
    assert exporter.ntax() == 0
    assert exporter.rows() == []
    assert exporter.characters() == []
    out = exporter.render()
    assert "0 0" in out
    assert "cnames" not in out