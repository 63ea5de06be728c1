# llmgather/cli/interface.py
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import fields as dataclass_fields, MISSING

import click
from click.core import ParameterSource
from click_option_group import optgroup
import structlog

from llmgather import __version__ as app_version
from llmgather.config.settings import (
    GatherConfig, PatternProfile, DEFAULT_PROFILE_NAME,
    DEFAULT_MAX_LINES_PER_FILE, DEFAULT_MAX_FILE_SIZE,
)
from llmgather.config.loader import (
    load_and_merge_configs, load_profiles, resolve_profile, save_profile,
    load_patterns_from_file, CONFIG_KEY_TO_GATHERCONFIG_ATTR_MAP,
)
from llmgather.logging_setup import configure_logging
from llmgather.core.output import render_lines, write_to_stdout, write_to_file, open_with_default_app
from llmgather.core.pipeline import SummaryGenerator
from llmgather.exceptions import GatherError
from llmgather.cli.console_output import progress_reporter, print_run_statistics, print_profiles

log = structlog.get_logger(__name__)

# cli parameters that override the matching GatherConfig field when given on the command line.
CLI_OVERRIDABLE_ATTRS = (
    "max_lines_per_file", "max_file_size", "show_tree", "follow_symlinks",
    "output_file", "open_after_generate", "console_show_summary",
)

PROGRESS_WRITE = 0.95
PROGRESS_DONE = 1.0


def _collect_extra_patterns(inline: Tuple[str, ...], from_files: Tuple[Path, ...]) -> List[str]:
    patterns = list(inline or ())
    for pattern_file in from_files or ():
        patterns.extend(load_patterns_from_file(pattern_file))
    return patterns


def _default_project_root(target: Optional[str]) -> Path:
    # without --root, a target outside the working directory becomes its own root.
    cwd = Path.cwd().resolve()
    if not target:
        return cwd
    target_path = (cwd / target).resolve()
    if target_path == cwd or cwd in target_path.parents:
        return cwd
    root = target_path if target_path.is_dir() else target_path.parent
    log.info("project_root_defaulted_to_target", target=str(target_path), root=str(root))
    return root


def _build_effective_options(
    ctx: click.Context, cli_params: Dict[str, Any], raw_config: Dict[str, Any]
) -> Dict[str, Any]:
    # dataclass defaults < config files < command line.
    effective: Dict[str, Any] = {}
    for fd in dataclass_fields(GatherConfig):
        if fd.init:
            effective[fd.name] = fd.default_factory() if fd.default_factory is not MISSING else fd.default

    for toml_k, attr in CONFIG_KEY_TO_GATHERCONFIG_ATTR_MAP.items():
        if toml_k in raw_config:
            effective[attr] = raw_config[toml_k]

    for attr in CLI_OVERRIDABLE_ATTRS:
        if ctx.get_parameter_source(attr) == ParameterSource.COMMANDLINE:
            effective[attr] = cli_params[attr]

    if cli_params.get("target"):
        effective["target"] = cli_params["target"]
    return effective


def _resolve_run_profile(
    cli_params: Dict[str, Any], raw_config: Dict[str, Any]
) -> Tuple[str, PatternProfile, Dict[str, PatternProfile]]:
    profiles = load_profiles(raw_config)
    requested = cli_params.get("profile_name") or raw_config.get("selected_profile") or DEFAULT_PROFILE_NAME
    base_profile = resolve_profile(profiles, requested)
    profile_name = requested if requested in profiles else DEFAULT_PROFILE_NAME

    profile = base_profile.extended(
        exclude=_collect_extra_patterns(cli_params["exclude_patterns"], cli_params["exclude_from_files"]),
        skip_content=_collect_extra_patterns(cli_params["skip_content_patterns"], cli_params["skip_content_from_files"]),
        include=_collect_extra_patterns(cli_params["include_patterns"], cli_params["include_from_files"]),
    )
    return profile_name, profile, profiles


def _run_summary_generation_flow(config: GatherConfig):
    log.info("summary_generation_flow_started", target=config.target, profile=config.profile_name)
    generator = SummaryGenerator(config)

    with progress_reporter() as report:
        output_lines = generator.generate(report)
        report("Writing output...", PROGRESS_WRITE)
        output_text = render_lines(output_lines)
        if config.output_file:
            write_to_file(config.output_file, output_text)
        report("Summary complete.", PROGRESS_DONE)

    if config.output_file:
        click.echo(f"Info: Output written to: {config.output_file}", err=True)
        if config.open_after_generate and not open_with_default_app(config.output_file):
            click.secho(f"Warning: Could not open {config.output_file}", fg="yellow", err=True)
    else:
        if config.open_after_generate:
            log.warning("open_after_generate_requires_output_file")
        write_to_stdout(output_text)

    if config.console_show_summary:
        print_run_statistics(generator.counters, config.output_file)
    return generator


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("target", required=False, default=None)
@optgroup.group("Input Options", help="Where to gather from.")
@optgroup.option("--root", "project_root", type=click.Path(exists=True, file_okay=False, path_type=Path), default=None, help="Project root that patterns and headings are relative to. Default: current directory.")
@optgroup.group("Filtering Options", help="Control which files are listed and which contents are shown.")
@optgroup.option("-e", "--exclude", "exclude_patterns", multiple=True, help="Glob patterns for files/directories to exclude (added to the profile).")
@optgroup.option("-s", "--skip-content", "skip_content_patterns", multiple=True, help="Glob patterns for files to list without content (added to the profile).")
@optgroup.option("-i", "--include", "include_patterns", multiple=True, help="Glob patterns for files to include (added to the profile).")
@optgroup.option("--exclude-from-file", "exclude_from_files", type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path), multiple=True, help="File(s) with exclude glob patterns.")
@optgroup.option("--skip-content-from-file", "skip_content_from_files", type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path), multiple=True, help="File(s) with skip-content glob patterns.")
@optgroup.option("--include-from-file", "include_from_files", type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path), multiple=True, help="File(s) with include glob patterns.")
@optgroup.option("-L", "--follow-symlinks", "follow_symlinks", is_flag=True, default=False, help="Descend into symlinked directories.")
@optgroup.group("Content Options", help="Limits applied to each file's content.")
@optgroup.option("--max-lines", "max_lines_per_file", type=click.IntRange(min=1), default=DEFAULT_MAX_LINES_PER_FILE, show_default=True, help="Lines beyond this limit are truncated.")
@optgroup.option("--max-size", "max_file_size", type=click.IntRange(min=0), default=DEFAULT_MAX_FILE_SIZE, show_default=True, help="Skip content of files larger than this many bytes (0 = unlimited).")
@optgroup.group("Output Options", help="Where the summary goes and what accompanies it.")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write the summary to this file instead of stdout.")
@optgroup.option("--open", "open_after_generate", is_flag=True, default=False, help="Open the output file with the default application afterwards.")
@optgroup.option("--tree/--no-tree", "show_tree", default=True, help="Include the directory structure block.")
@optgroup.option("--console-summary/--no-console-summary", "console_show_summary", default=True, help="Print run statistics to stderr.")
@optgroup.group("Profiles", help="Named pattern profiles stored in .llmgather.toml.")
@optgroup.option("-p", "--profile", "profile_name", default=None, help=f"Profile to use. Default: selected_profile from config, else '{DEFAULT_PROFILE_NAME}'.")
@optgroup.option("--save", "save_profile_name", metavar="PROFILE_NAME", default=None, help="Save the effective patterns as a profile in the project's .llmgather.toml and exit.")
@optgroup.option("--list-profiles", "list_profiles", is_flag=True, default=False, help="List available profiles and exit.")
@optgroup.group("Application Behavior", help="Logging and diagnostics.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs", is_flag=True, default=False, help="Emit logs as JSON.")
@click.version_option(version=app_version, prog_name="llmgather", help="Show version and exit.")
@click.pass_context
def main_cli(ctx: click.Context, **cli_params: Any):
    """llmgather: gather a directory tree and file contents into one
    Markdown summary, ready to hand to a language model."""

    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs", False))

    log.debug("cli_command_invoked", params={k: v for k, v in cli_params.items() if v not in (None, (), False)})

    try:
        project_root: Optional[Path] = cli_params.get("project_root")
        project_root = project_root.resolve() if project_root else _default_project_root(cli_params.get("target"))

        raw_config = load_and_merge_configs(project_root)
        profile_name, profile, profiles = _resolve_run_profile(cli_params, raw_config)

        if cli_params.get("list_profiles"):
            print_profiles(profiles, profile_name)
            ctx.exit(0)

        if cli_params.get("save_profile_name"):
            saved_to = save_profile(profile, cli_params["save_profile_name"], project_root)
            click.echo(f"Profile '{cli_params['save_profile_name']}' saved to {saved_to}", err=True)
            ctx.exit(0)

        effective_options = _build_effective_options(ctx, cli_params, raw_config)
        effective_options.update(project_root=project_root, profile=profile, profile_name=profile_name)
        final_config = GatherConfig(**effective_options)
        _run_summary_generation_flow(final_config)

    except click.exceptions.Exit:
        raise
    except GatherError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except click.ClickException as e:
        log.error("click_exception_in_cli", error_type=type(e).__name__, message=str(e))
        e.show(); sys.exit(e.exit_code)
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
        sys.exit(1)
