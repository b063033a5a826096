# nexusfmt

A library for reading, building and writing NEXUS files, the text format
used in phylogenetics for taxa, character matrices and trees. It can also
write a character matrix in the `xread` format read by TNT and NONA.

## Installation

```
pip install nexusfmt
```

## What it understands

- `TAXA` blocks (`nexusfmt.blocks.taxa.TaxaBlock`): `TITLE`, `DIMENSIONS NTAX=`,
  `TAXLABELS`, `TAXSET` and `TAXPARTITION` (standard and `VECTOR` forms).
  Labels are checked against `NTAX`, and all-digit or duplicate names
  (ignoring case and treating `_` as a space) are rejected.
- `CHARACTERS` blocks (`nexusfmt.blocks.characters.block.CharactersBlock`):
  `TITLE`, `DIMENSIONS NCHAR=`, `FORMAT` (data type, missing, gap, symbols,
  equates, match character, interleave, tokens, labels and more),
  `CHARLABELS`, `STATELABELS`, `CHARSTATELABELS`, `ELIMINATE` and `MATRIX`.
  In the matrix, polymorphic `(..)` and uncertain `{..}` cells, ranges such
  as `0~3`, `symbol:weight` values, IUPAC ambiguity codes and match
  characters are resolved as they are read.
- `TREES` blocks (`nexusfmt.blocks.trees.TreesBlock`): `TRANSLATE` and
  `TREE`, with Newick descriptions built into `TreeNode` objects.
- Any other block becomes a `nexusfmt.blocks.generic.GenericBlock` that keeps
  its body text as it was, so it is written back unchanged.

## Reading a file

`nexusfmt.nexus.parse` takes a string, bytes or an open file.

```python
from nexusfmt.nexus import parse

with open("data.nex", encoding="utf-8") as fh:
    nex = parse(fh)

taxa = nex.get_taxa_block()
if taxa is not None:
    print(taxa.dimensions, taxa.tax_labels)

chars = nex.get_characters_block()
if chars is not None:
    fish = chars.matrix.get_taxon("fish")
    first = chars.matrix.get_character_by_index(1)
    print(fish.get_state(first))

other = nex.get_block_by_name("ASSUMPTIONS")
```

The `get_*_block` methods return the first block of that kind, or `None`.

## Building a file

```python
import sys

from nexusfmt.nexus import Nexus
from nexusfmt.blocks.characters.model import DataType, StateType
from nexusfmt.blocks.trees import TreeNode

nex = Nexus()
taxa = nex.new_taxa_block()
chars = nex.new_characters_block(DataType.STANDARD)

for name in ("fish", "frog"):
    taxa.add_taxon(name)
    chars.add_taxon(name)

tail = chars.matrix.add_character("tail length", "short", "long")
chars.matrix.get_taxon("fish").set_state(tail, StateType.SINGLE, "long")

trees = nex.new_trees_block()
trees.add_translate("1", "fish")
trees.add_translate("2", "frog")
root = (
    TreeNode()
    .add_child(TreeNode().set_name("1").set_branch_length("0.5"))
    .add_child(TreeNode().set_name("2").set_branch_length("0.2"))
)
trees.add_tree("example", True, root)

nex.export(sys.stdout)
```

State labels given to `set_state` are turned into their symbols; other
text is stored as given. Cells never set are written as missing data.
`nex.new_unknown_block(name)` adds a block that holds raw text in its
`content` attribute.

## Exporting to TNT or NONA

```python
from nexusfmt.exports.xread import Exporter, Variant

text = (
    Exporter(nex, Variant.TNT)
    .set_project("Example project")
    .set_author("A. Researcher")
    .add_command("nstates 32;")
    .render()
)
```

The exporter writes the first `CHARACTERS` block. Polymorphic and uncertain
cells become `[..]`, and character names and state labels are written in a
`cnames` section when any exist. For `Variant.TNT`, `taxname=;` is written
by default (turn it off with `set_taxname(False)`) and commands added with
`add_command` come before `xread`.

## Errors

Malformed input raises `nexusfmt.scanner.NexusSyntaxError` (a `ValueError`)
with a message describing what was expected. Editing methods raise
`ValueError` for invalid or duplicate taxa and `KeyError` when removing
something that does not exist.

## What it does not do

`nexusfmt` is a library only: it has no command-line program. It does not
check a matrix against a `TAXA` block, and adding a translation to a
`TREES` block does not add the taxon to a `TAXA` block.