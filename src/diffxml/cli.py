# -*- coding: utf-8 -*-
"""
Command line front ends: ``diffxml`` and ``patchxml``.

``diffxml`` exits with 0 when the documents are the same, 1 when they differ
and 2 on errors.  ``patchxml`` exits with 0 on success and 2 on errors.
"""
import logging
import sys
from pathlib import Path

import click

from . import diff_files, load_for_patch
from .config import DiffConfig, VERSION
from .delta import decode, encode
from .exceptions import DiffXMLError
from .patch import apply_patch
from .serializer import serialize

log = logging.getLogger(__name__)

_existing_file = click.Path(exists=True, dir_okay=False, path_type=Path)


def _setup_logging(debug):
    if debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)


@click.command()
@click.argument("original", type=_existing_file)
@click.argument("modified", type=_existing_file)
@click.option("-q", "--brief", is_flag=True,
              help="Only report whether the documents differ.")
@click.option("-w", "--ignore-all-whitespace", is_flag=True,
              help="Ignore all whitespace when comparing text.")
@click.option("--ignore-leading-whitespace", is_flag=True,
              help="Ignore leading and trailing whitespace of text.")
@click.option("--ignore-whitespace-nodes", is_flag=True,
              help="Ignore text nodes that only hold whitespace.")
@click.option("-i", "--ignore-case", is_flag=True,
              help="Compare text case-insensitively.")
@click.option("-c", "--ignore-comments", is_flag=True,
              help="Ignore comments.")
@click.option("-p", "--ignore-processing-instructions", is_flag=True,
              help="Ignore processing instructions.")
@click.option("-r", "--reverse-patch", is_flag=True,
              help="Mark the delta as usable for reverse patching.")
@click.option("-C", "--context", is_flag=True,
              help="Write context sizes into the delta.")
@click.option("--sibling-context", type=click.IntRange(min=0), default=2,
              show_default=True)
@click.option("--parent-context", type=click.IntRange(min=0), default=1,
              show_default=True)
@click.option("--parent-sibling-context", type=click.IntRange(min=0),
              default=0, show_default=True)
@click.option("-n", "--no-resolve-entities", is_flag=True,
              help="Keep entity references unexpanded.")
@click.option("--html", is_flag=True,
              help="Parse both inputs as HTML fragments.")
@click.option("-D", "--debug", is_flag=True, help="Log debug output to stderr.")
@click.version_option(VERSION, "-V", "--version")
def diffxml(original, modified, brief, ignore_all_whitespace,
            ignore_leading_whitespace, ignore_whitespace_nodes, ignore_case,
            ignore_comments, ignore_processing_instructions, reverse_patch,
            context, sibling_context, parent_context, parent_sibling_context,
            no_resolve_entities, html, debug):
    """Print the DUL delta that turns ORIGINAL into MODIFIED."""
    _setup_logging(debug)
    config = DiffConfig(
        ignore_all_whitespace=ignore_all_whitespace,
        ignore_leading_whitespace=ignore_leading_whitespace,
        ignore_whitespace_nodes=ignore_whitespace_nodes,
        ignore_case=ignore_case,
        ignore_comments=ignore_comments,
        ignore_processing_instructions=ignore_processing_instructions,
        reverse_patch=reverse_patch,
        context=context,
        sibling_context=sibling_context,
        parent_context=parent_context,
        parent_sibling_context=parent_sibling_context,
        resolve_entities=not no_resolve_entities,
    )
    try:
        script = diff_files(original, modified, config, html=html)
    except DiffXMLError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    if brief:
        if not script.is_empty:
            click.echo(f"Files {original} and {modified} differ")
    else:
        click.echo(encode(script), nl=False)
    sys.exit(0 if script.is_empty else 1)


@click.command()
@click.argument("document", type=_existing_file)
@click.argument("delta", type=_existing_file)
@click.option("--in-place", is_flag=True,
              help="Write the result back to DOCUMENT.")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the result to this file.")
@click.option("-D", "--debug", is_flag=True, help="Log debug output to stderr.")
@click.version_option(VERSION, "-V", "--version")
def patchxml(document, delta, in_place, output, debug):
    """Apply the DUL DELTA to DOCUMENT."""
    _setup_logging(debug)
    if in_place and output is not None:
        raise click.UsageError("--in-place and --output are exclusive")
    try:
        script = decode(delta.read_bytes())
        doc = load_for_patch(document, script)
        apply_patch(doc, script)
    except DiffXMLError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    result = serialize(doc, xml_declaration=True) + "\n"
    target = document if in_place else output
    if target is None:
        click.echo(result, nl=False)
    else:
        target.write_text(result, encoding="utf-8")
        log.debug("wrote %s", target)
