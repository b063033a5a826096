"""The TREES block: translation table and Newick trees."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core import Block, Core, register_block
from ..names import encode_name, quote_name
from ..parser import expect_semicolon, read_until_semicolon
from ..scanner import Scanner

_BLOCK_END = ("END", "ENDBLOCK")


@dataclass
class TreeNode:
    """A clade or leaf of a tree."""

    name: str = ""
    branch_length: str = ""
    comments: list[str] = field(default_factory=list)
    children: list[TreeNode] = field(default_factory=list)

    def set_name(self, name: str) -> TreeNode:
        """Set the node's label and return the node."""
        self.name = name
        return self

    def set_branch_length(self, length: str) -> TreeNode:
        """Set the length of the branch below this node and return the node."""
        self.branch_length = length
        return self

    def add_comment(self, comment: str) -> TreeNode:
        """Attach a comment such as "[&R]" and return the node."""
        self.comments.append(comment)
        return self

    def add_child(self, child: TreeNode) -> TreeNode:
        """Attach a child and return this (the parent) node."""
        self.children.append(child)
        return self

    def render(self) -> str:
        """Return the subtree in Newick notation, without the final ';'."""
        parts = [f"{comment} " for comment in self.comments]
        if self.children:
            parts.append("(" + ",".join(child.render() for child in self.children) + ")")
        parts.append(self.name)
        if self.branch_length:
            parts.append(f":{self.branch_length}")
        return "".join(parts).strip()


@dataclass
class Tree:
    """A named tree; is_default marks the tree written with '*'."""

    name: str
    is_default: bool = False
    root: TreeNode | None = None


def build_newick_tree(tokens: list[str]) -> TreeNode:
    """Build a node structure from the tokens of a Newick description."""
    root = TreeNode()
    current = root
    stack: list[TreeNode] = []
    stream = iter(tokens)

    for tok in stream:
        if tok.startswith("["):
            current.comments.append(tok)
        elif tok == "(":
            child = TreeNode()
            current.children.append(child)
            stack.append(current)
            current = child
        elif tok == ",":
            if stack:
                child = TreeNode()
                stack[-1].children.append(child)
                current = child
        elif tok == ")":
            if stack:
                current = stack.pop()
        elif tok == ":":
            length = next(stream, None)
            if length is not None:
                current.branch_length = length
        else:
            current.name = tok
    return root


class TreesBlock(Block):
    """A TREES block."""

    def __init__(self, name: str = "TREES", core: Core | None = None) -> None:
        self.name = name
        self.core = core
        self.translate: dict[str, str] = {}
        self.trees: list[Tree] = []

    def parse(self, scanner: Scanner) -> None:
        """Read TRANSLATE and TREE commands up to and including END;."""
        while True:
            command = scanner.next_token().upper()
            if command in _BLOCK_END:
                expect_semicolon(scanner)
                return
            if command == "TRANSLATE":
                self._parse_translate(read_until_semicolon(scanner))
            elif command == "TREE":
                self._parse_tree(scanner)
            else:
                read_until_semicolon(scanner)

    def _parse_translate(self, tokens: list[str]) -> None:
        pending: str | None = None
        for tok in tokens:
            if tok == ",":
                continue
            if pending is None:
                pending = tok
            else:
                self.translate[pending] = tok
                pending = None

    def _parse_tree(self, scanner: Scanner) -> None:
        token = scanner.next_token()
        is_default = token == "*"
        if is_default:
            token = scanner.next_token()
        scanner.next_token()  # the '=' sign
        spec = read_until_semicolon(scanner)
        self.trees.append(Tree(token, is_default, build_newick_tree(spec)))

    def render(self) -> str:
        """Return the block as NEXUS text."""
        lines = ["BEGIN TREES;"]
        if self.translate:
            entries = [
                f"\t\t{token} {encode_name(self.translate[token])}"
                for token in sorted(self.translate)
            ]
            lines.append("\tTRANSLATE")
            lines.append(",\n".join(entries))
            lines.append("\t;")
        for tree in self.trees:
            star = "* " if tree.is_default else ""
            newick = tree.root.render() if tree.root is not None else ""
            lines.append(f"\tTREE {star}{quote_name(tree.name)} = {newick};")
        lines.append("END;")
        return "\n".join(lines)

    def add_translate(self, token: str, taxon_name: str) -> None:
        """Map token to a taxon name and register the taxon with the file."""
        self.translate[token] = taxon_name
        if self.core is not None:
            self.core.register_taxon(taxon_name)

    def add_tree(self, name: str, is_default: bool, root: TreeNode) -> None:
        """Append a tree built from root."""
        self.trees.append(Tree(name, is_default, root))


def new_block(core: Core) -> TreesBlock:
    """Create a TREES block and append it to core."""
    block = TreesBlock("TREES", core)
    core.blocks.append(block)
    return block


register_block("TREES", TreesBlock)