import json
import logging
import sys
from decimal import Decimal

import click

from . import __version__ as VERSION
from .config import OUTPUT_FORMATS, parse_key_field_pairs, refresh_config
from .diff import as_json_patch, diff, format_human_diff, summarize_events
from .errors import TreeDiffError
from .unchanged import compute_unchanged
from .values import json_default, validate_document

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.pass_context
@click.option("--version", is_flag=True, help="Show the version and exit.")
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def main(ctx, version, verbose):
    """treediff: semantic, key-aware diffs of JSON documents"""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if version:
        click.echo(f"treediff version {VERSION}")
        return
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _emit_structured_error(message: str, *, code: str, category: str, exit_code: int = 2):
    prefix = "treediff internal error" if code == "INTERNAL" else "treediff error"
    click.echo(f"{prefix} [{category}:{code}]: {message}", err=True)
    sys.exit(exit_code)


def _load_document(path: str):
    with open(path, "r", encoding="utf-8") as handle:
        try:
            return json.load(handle, parse_float=Decimal)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(f"{path} is not valid JSON: {exc}") from exc


def _collect_key_fields(config, key_file, keys, keyed):
    key_fields = dict(config.key_fields)
    if key_file:
        loaded = _load_document(key_file)
        if not isinstance(loaded, dict):
            raise click.BadParameter(f"{key_file} must hold a JSON object of pointer -> field")
        key_fields.update({pointer: (field or None) for pointer, field in loaded.items()})
    for entry in keys:
        key_fields.update(parse_key_field_pairs(entry))
    if key_fields or keyed:
        return key_fields
    return None


@main.command(name="diff")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.argument("target", type=click.Path(exists=True, dir_okay=False))
@click.option("--key", "keys", multiple=True, help="Array key field as <pointer>=<field>; empty field matches by value")
@click.option("--key-file", type=click.Path(exists=True, dir_okay=False), help="JSON object mapping pointers to key fields")
@click.option("--keyed", is_flag=True, help="Use the key-aware engine even without key fields")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), help="Output format (default from config)")
@click.option("--indent", type=int, help="JSON indentation (default from config)")
@click.option("--no-factor", is_flag=True, help="Do not factor removals/additions into move/copy operations")
def diff_command(source, target, keys, key_file, keyed, output_format, indent, no_factor):
    """Diff SOURCE against TARGET. Exits 1 when the documents differ."""
    try:
        config = refresh_config()
        output_format = output_format or config.output_format
        indent = config.indent if indent is None else indent

        source_doc = _load_document(source)
        target_doc = _load_document(target)
        key_fields = _collect_key_fields(config, key_file, keys, keyed)

        if output_format == "patch":
            result = as_json_patch(source_doc, target_doc, key_fields, factor_moves=config.factor_moves and not no_factor)
            click.echo(json.dumps(result, indent=indent or None, default=json_default, ensure_ascii=False))
            changed = bool(result)
        else:
            events = diff(source_doc, target_doc, key_fields)
            if output_format == "human":
                click.echo(format_human_diff(events))
                click.echo(summarize_events(events))
            else:
                click.echo(json.dumps([event.as_dict() for event in events], indent=indent or None, default=json_default, ensure_ascii=False))
            changed = bool(events)
    except click.ClickException:
        raise
    except TreeDiffError as exc:
        _emit_structured_error(exc.explanation, code=exc.error_code, category=exc.category)
    except Exception as exc:  # keep the exit-code contract for scripted callers
        logger.exception("Unhandled treediff error")
        _emit_structured_error(str(exc), code="INTERNAL", category="SYSTEM")

    sys.exit(1 if changed else 0)


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.argument("target", type=click.Path(exists=True, dir_okay=False))
@click.option("--indent", type=int, help="JSON indentation (default from config)")
def unchanged(source, target, indent):
    """List locations whose value is identical in SOURCE and TARGET."""
    try:
        config = refresh_config()
        indent = config.indent if indent is None else indent

        source_doc = validate_document(_load_document(source), "source")
        target_doc = validate_document(_load_document(target), "target")
        result = compute_unchanged(source_doc, target_doc)

        payload = {pointer.path: value for pointer, value in sorted(result.items())}
        click.echo(json.dumps(payload, indent=indent or None, default=json_default, ensure_ascii=False))
    except click.ClickException:
        raise
    except TreeDiffError as exc:
        _emit_structured_error(exc.explanation, code=exc.error_code, category=exc.category)
    except Exception as exc:
        logger.exception("Unhandled treediff error")
        _emit_structured_error(str(exc), code="INTERNAL", category="SYSTEM")


if __name__ == "__main__":
    main()
