"""Streaming triple parsing backed by Oxigraph.

This module turns one change file into a lazy sequence of triples.
Each call builds a fresh parser so no state leaks across files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

from pyoxigraph import DefaultGraph, RdfFormat, parse

from core.constants import N_QUADS_SUFFIX
from core.errors import DirectoryAccessError, IngestParseError
from core.types import Triple


def parse_triples(file_path: Path) -> Iterator[Triple]:
    """Yield triples from an N-Triples or N-Quads file in parse order.

    Args:
        file_path: Change file to parse.

    Yields:
        Parsed triples with terms in N-Triples notation.

    Raises:
        IngestParseError: If the serialization is malformed.
        DirectoryAccessError: If the file cannot be read.
    """
    rdf_format = _rdf_format_for(file_path)
    try:
        with file_path.open("rb") as stream:
            for quad in parse(stream, format=rdf_format):
                yield _triple_from_quad(quad)
    except (SyntaxError, ValueError) as error:
        raise IngestParseError(file_path, _describe_syntax_error(error)) from error
    except OSError as error:
        raise DirectoryAccessError(file_path, error.strerror or str(error)) from error


def _rdf_format_for(file_path: Path) -> RdfFormat:
    """Pick the serialization format from the data suffix."""
    if file_path.name.endswith(N_QUADS_SUFFIX):
        return RdfFormat.N_QUADS
    return RdfFormat.N_TRIPLES


def _triple_from_quad(quad: Any) -> Triple:
    graph_name = quad.graph_name
    return Triple(
        subject=str(quad.subject),
        predicate=str(quad.predicate),
        object=str(quad.object),
        graph=None if isinstance(graph_name, DefaultGraph) else str(graph_name),
    )


def _describe_syntax_error(error: Exception) -> str:
    """Render parser errors with their line number when the message lacks it."""
    message = getattr(error, "msg", None) or str(error)
    line_number = getattr(error, "lineno", None)
    if line_number and f"line {line_number}" not in message:
        return f"line {line_number}: {message}"
    return message
