"""Structured representation of one conflict region."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

CHOICES = ("ours", "theirs", "both", "base")


@dataclass(frozen=True)
class ConflictChunk:
    """One ``<<<<<<< ... ======= ... >>>>>>>`` block of a scanned file.

    IDs and line numbers describe the content that was scanned and
    nothing else; any write to the file invalidates them.

    Attributes:
        id: Zero-based position among the file's chunks, top to bottom
        ours_lines: Lines between the start marker and the divider (or
            the diff3 base marker), without line endings
        theirs_lines: Lines between the divider and the end marker
        start_line: 1-indexed line of the start marker
        end_line: 1-indexed line of the end marker
        base_lines: Common ancestor lines of a diff3-style conflict,
            else None
        ours_label: Label after the start marker, e.g. ``HEAD``
        theirs_label: Label after the end marker, e.g. ``feature``
        separator: Line ending of the start marker; joins the sides
            and terminates replacement lines
    """

    id: int
    ours_lines: tuple[str, ...]
    theirs_lines: tuple[str, ...]
    start_line: int
    end_line: int
    base_lines: tuple[str, ...] | None = None
    ours_label: str = ""
    theirs_label: str = ""
    separator: str = "\n"

    @property
    def ours(self) -> str:
        return self.separator.join(self.ours_lines)

    @property
    def theirs(self) -> str:
        return self.separator.join(self.theirs_lines)

    @property
    def base(self) -> str | None:
        if self.base_lines is None:
            return None
        return self.separator.join(self.base_lines)

    @property
    def line_count(self) -> int:
        """Lines spanned, markers included."""
        return self.end_line - self.start_line + 1

    @property
    def fingerprint(self) -> str:
        """Short digest of the chunk's sides.

        Stable across scans as long as the chunk's text is unchanged,
        so it identifies a chunk independently of its current ID.
        """
        digest = hashlib.sha256()
        for lines in (self.ours_lines, self.base_lines, self.theirs_lines):
            if lines is None:
                digest.update(b"\x02")
                continue
            digest.update(b"\x01%d\x00" % len(lines))
            for line in lines:
                digest.update(line.encode("utf-8", "surrogateescape"))
                digest.update(b"\x00")
        return digest.hexdigest()[:12]

    def side_lines(self, choice: str) -> list[str]:
        """Lines that resolve this chunk in favour of one side.

        Args:
            choice: ``ours``, ``theirs``, ``both`` (ours followed by
                theirs) or ``base`` (diff3 conflicts only)

        Raises:
            ValueError: For an unknown choice, or ``base`` on a
                two-way conflict
        """
        if choice == "ours":
            return list(self.ours_lines)
        if choice == "theirs":
            return list(self.theirs_lines)
        if choice == "both":
            return list(self.ours_lines) + list(self.theirs_lines)
        if choice == "base":
            if self.base_lines is None:
                raise ValueError(
                    f"chunk {self.id} has no base section "
                    f"(not a diff3-style conflict)"
                )
            return list(self.base_lines)
        raise ValueError(
            f"Unknown choice '{choice}'; use one of {', '.join(CHOICES)}"
        )
