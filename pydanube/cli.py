"""CLI interface for DanubeData static sites."""

import logging
from pathlib import Path
from typing import Any, Optional

import click
from rich.text import Text

from . import __version__
from .api import DanubeClient
from .auth import require_project, require_token
from .cli_progress import run_poll_with_progress
from .config import config
from .exceptions import (
    DanubeAPIError,
    DanubeAuthenticationError,
    DanubeNetworkError,
    DanubeNotFoundError,
    DanubePackagingError,
)
from .models import (
    DeployResponse,
    StaticSite,
    StaticSiteDeployment,
    StaticSiteDomain,
    Team,
    User,
)
from .output import OutputFormatter, status_color
from .packaging import ARCHIVE_FILE_NAME, package_directory
from .poller import DeploymentPoller, PollOutcome
from .project import (
    PROJECT_DIR,
    PROJECT_FILE,
    ProjectConfig,
    read_danube_json,
    write_project_config,
)
from .utils import format_date
from .version import PACKAGE_NAME, check_for_update, get_current_version

logger = logging.getLogger(__name__)

SITE_DOMAIN_SUFFIX = "danubesites.ro"


def report_api_error(out: OutputFormatter, error: DanubeAPIError) -> None:
    """Print an API error, including field validation errors."""
    if error.status_code is None or isinstance(error, DanubeAuthenticationError):
        out.error(str(error))
    else:
        out.error(f"API Error ({error.status_code}): {error.message}")
    for field_name, messages in error.errors.items():
        for message in messages:
            out.error(f"  {field_name}: {message}")


def _choose(out: OutputFormatter, message: str, labels: list[str]) -> int:
    """Prompt for one of a numbered list of options.

    Returns:
        0-based index of the chosen option
    """
    for number, label in enumerate(labels, start=1):
        out.print(f"  {number}) {label}")
    choice = click.prompt(message, type=click.IntRange(1, len(labels)))
    return choice - 1


def _require_name(value: str) -> str:
    if not value.strip():
        raise click.BadParameter("Name is required")
    return value.strip()


def site_url(project: ProjectConfig) -> str:
    """Public URL of a linked site."""
    return f"https://{project.site_name}.{SITE_DOMAIN_SUFFIX}"


@click.group()
@click.option("--token", "-t", envvar="DANUBE_TOKEN", help="DanubeData API token")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(version=__version__, prog_name="danube")
@click.pass_context
def main(
    ctx: Any,
    token: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """Danube - Deploy static sites to DanubeData."""
    ctx.ensure_object(dict)
    ctx.obj["token"] = token
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pydanube").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


# =========================
# Authentication
# =========================


@main.command()
@click.option("--token", "token_option", help="API token (prompted for if omitted)")
@click.pass_context
def login(ctx: Any, token_option: Optional[str]) -> None:
    """Authenticate with DanubeData.

    Validates the API token and stores it in ~/.danube/config.json.
    """
    out: OutputFormatter = ctx.obj["out"]
    api_base = config.api_base

    token = token_option
    if not token:
        out.info("Log in to DanubeData\n")
        out.info(f"Create an API token at: {api_base}/user/api-tokens\n")
        token = click.prompt(
            "Paste your API token", hide_input=True, default="", show_default=False
        )

    token = (token or "").strip()
    if not token:
        out.error("No token provided.")
        ctx.exit(1)

    client = DanubeClient(token=token, api_url=api_base, max_retries=0)
    try:
        user = User.from_dict(client.get_user() or {})
    except DanubeAuthenticationError:
        out.error("Invalid token.")
        ctx.exit(1)
    except DanubeNetworkError as e:
        logger.debug(f"Login failed: {e}")
        out.error("Failed to connect to DanubeData API.")
        ctx.exit(1)
    except DanubeAPIError as e:
        report_api_error(out, e)
        ctx.exit(1)
    finally:
        client.close()

    config_path = config.save_token(token, api_base)
    logger.debug(f"Token saved to {config_path}")
    out.success(f"\nAuthenticated as {user.name} ({user.email})")


@main.command()
@click.pass_context
def logout(ctx: Any) -> None:
    """Remove stored authentication."""
    out: OutputFormatter = ctx.obj["out"]
    config.clear()
    out.success("Logged out.")


@main.command()
@click.pass_context
def whoami(ctx: Any) -> None:
    """Show the current authenticated user."""
    out: OutputFormatter = ctx.obj["out"]
    token = require_token(ctx, out)

    with DanubeClient(token=token) as client:
        try:
            user = User.from_dict(client.get_user() or {})
            teams_data = (client.get_teams() or {}).get("data", [])
        except DanubeAPIError as e:
            report_api_error(out, e)
            ctx.exit(1)

    teams = [Team.from_dict(team) for team in teams_data]

    if out.json_output:
        out.output_json(
            {
                "name": user.name,
                "email": user.email,
                "teams": [team.name for team in teams],
            }
        )
        return

    out.print(user.name, style="bold")
    out.print(f"Email: {user.email}")
    out.print(f"Teams: {', '.join(team.name for team in teams)}")


# =========================
# Project linking
# =========================


@main.command()
@click.pass_context
def link(ctx: Any) -> None:
    """Link the current directory to a DanubeData static site.

    Picks a team (automatically when there is only one), then an existing
    site or a new one, and writes .danube/project.json.
    """
    out: OutputFormatter = ctx.obj["out"]
    token = require_token(ctx, out)

    with DanubeClient(token=token) as client:
        try:
            teams = [
                Team.from_dict(team)
                for team in (client.get_teams() or {}).get("data", [])
            ]
            if not teams:
                out.error("No teams found for this account.")
                ctx.exit(1)

            if len(teams) == 1:
                team = teams[0]
                out.info(f"Team: {team.name}")
            else:
                team = teams[
                    _choose(out, "Select a team", [team.name for team in teams])
                ]

            sites = [
                StaticSite.from_dict(site)
                for site in (client.get_static_sites(team.id) or {}).get("data", [])
            ]
            labels = [f"{site.name} ({site.default_domain})" for site in sites]
            labels.append("+ Create new site")
            index = _choose(out, "Select a site to link", labels)

            if index == len(sites):
                name = click.prompt("Site name", value_proc=_require_name)
                created = client.create_static_site(team.id, name) or {}
                site = StaticSite.from_dict(created.get("data") or {})
                out.success(f"Created site: {site.name}")
            else:
                site = sites[index]
        except DanubeAPIError as e:
            report_api_error(out, e)
            ctx.exit(1)

    write_project_config(
        ProjectConfig(site_id=site.id, team_id=team.id, site_name=site.name)
    )
    out.success(f"\nLinked to {site.name} ({site.default_domain})")
    out.info(f"Config saved to {PROJECT_DIR}/{PROJECT_FILE}")


# =========================
# Deploy
# =========================


@main.command()
@click.option(
    "--dir",
    "directory",
    type=click.Path(),
    help="Directory to deploy (overrides outputDir in danube.json)",
)
@click.option(
    "--wait/--no-wait",
    default=True,
    help="Wait for the build to finish (default: wait)",
)
@click.pass_context
def deploy(ctx: Any, directory: Optional[str], wait: bool) -> None:
    """Deploy your site to DanubeData.

    Packages the deploy directory into a tar.gz archive, honoring
    .gitignore, .daubeignore and the ignore list in danube.json, uploads it
    and waits until the new build is live.

    Examples:
        danube deploy                     # Deploy outputDir or the current dir
        danube deploy --dir dist          # Deploy ./dist
        danube deploy --no-wait           # Upload and return immediately
    """
    out: OutputFormatter = ctx.obj["out"]
    project = require_project(ctx, out)
    token = require_token(ctx, out)
    danube_json = read_danube_json()

    output_dir = danube_json.output_dir if danube_json else None
    deploy_dir = Path(directory or output_dir or ".").resolve()
    if not deploy_dir.is_dir():
        out.error(f"Directory not found: {deploy_dir}")
        ctx.exit(1)

    out.info(f"Packaging files in {deploy_dir}...")
    try:
        package = package_directory(
            deploy_dir, danube_json.ignore if danube_json else None
        )
    except DanubePackagingError as e:
        out.error(str(e))
        ctx.exit(1)
    except OSError as e:
        out.error(f"Failed to package {deploy_dir}: {e}")
        ctx.exit(1)
    out.success(
        f"Packaged {package.file_count} files ({out.format_size(package.size)})"
    )

    with DanubeClient(token=token) as client:
        try:
            out.info("Uploading...")
            response = DeployResponse.from_dict(
                client.deploy(project.site_id, package.buffer, ARCHIVE_FILE_NAME)
            )
            out.success("Uploaded")

            if not wait:
                if out.json_output:
                    out.output_json({"status": response.status})
                else:
                    out.success(f"\nDeployment started. Status: {response.status}")
                return

            poller = DeploymentPoller(
                lambda: client.get_latest_build(project.site_id)
            )
            result = run_poll_with_progress(poller, out)
        except DanubeAPIError as e:
            report_api_error(out, e)
            ctx.exit(1)

    if out.json_output:
        out.output_json(
            {
                "status": result.outcome.value,
                "url": site_url(project) if result.is_live else None,
                "error_message": result.error_message,
            }
        )
    elif result.outcome is PollOutcome.LIVE:
        out.success("Deployed! Status: live")
        out.print(f"\nLive at: {site_url(project)}", style="green")
    elif result.outcome is PollOutcome.TIMED_OUT:
        out.warning(
            "Timed out waiting for deployment. "
            "Check status with `danube deployments ls`."
        )

    if result.outcome is PollOutcome.FAILED:
        out.error("Deployment failed")
        if result.error_message:
            out.error(result.error_message)
        ctx.exit(1)


# =========================
# Deployments
# =========================


@main.group()
def deployments() -> None:
    """Manage deployments."""


@deployments.command("ls")
@click.pass_context
def deployments_ls(ctx: Any) -> None:
    """List deployments of the linked site."""
    out: OutputFormatter = ctx.obj["out"]
    project = require_project(ctx, out)
    token = require_token(ctx, out)

    with DanubeClient(token=token) as client:
        try:
            data = (client.get_deployments(project.site_id) or {}).get("data", [])
        except DanubeAPIError as e:
            report_api_error(out, e)
            ctx.exit(1)

    items = [StaticSiteDeployment.from_dict(item) for item in data]

    if out.json_output:
        out.output_json([item.to_dict() for item in items])
        return

    if not items:
        out.print("No deployments yet.")
        return

    rows = [
        [
            str(item.revision),
            status_color("active") if item.is_active else Text("inactive", "dim"),
            format_date(item.activated_at),
            format_date(item.created_at),
        ]
        for item in items
    ]
    out.output_table(["REVISION", "STATUS", "ACTIVATED", "CREATED"], rows)


@deployments.command()
@click.argument("revision", type=int)
@click.pass_context
def rollback(ctx: Any, revision: int) -> None:
    """Activate a previous deployment.

    REVISION: Deployment revision number (see `danube deployments ls`)
    """
    out: OutputFormatter = ctx.obj["out"]
    project = require_project(ctx, out)
    token = require_token(ctx, out)

    with DanubeClient(token=token) as client:
        try:
            deployment = client.find_deployment(project.site_id, revision)
            out.info(f"Rolling back to revision {revision}...")
            client.activate_deployment(project.site_id, deployment.id)
        except DanubeNotFoundError as e:
            out.error(str(e))
            ctx.exit(1)
        except DanubeAPIError as e:
            report_api_error(out, e)
            ctx.exit(1)

    out.success(f"Rolled back to revision {revision}")


# =========================
# Domains
# =========================


@main.group()
def domains() -> None:
    """Manage custom domains."""


@domains.command("ls")
@click.pass_context
def domains_ls(ctx: Any) -> None:
    """List domains of the linked site."""
    out: OutputFormatter = ctx.obj["out"]
    project = require_project(ctx, out)
    token = require_token(ctx, out)

    with DanubeClient(token=token) as client:
        try:
            data = (client.get_domains(project.site_id) or {}).get("data", [])
        except DanubeAPIError as e:
            report_api_error(out, e)
            ctx.exit(1)

    items = [StaticSiteDomain.from_dict(item) for item in data]

    if out.json_output:
        out.output_json([item.to_dict() for item in items])
        return

    if not items:
        out.print("No domains configured.")
        return

    rows = [
        [item.domain, item.type, status_color(item.status), item.verified_at or "-"]
        for item in items
    ]
    out.output_table(["DOMAIN", "TYPE", "STATUS", "VERIFIED"], rows)


@domains.command("add")
@click.argument("domain")
@click.pass_context
def domains_add(ctx: Any, domain: str) -> None:
    """Add a custom domain.

    DOMAIN: Domain name to add (e.g. www.example.com)
    """
    out: OutputFormatter = ctx.obj["out"]
    project = require_project(ctx, out)
    token = require_token(ctx, out)

    with DanubeClient(token=token) as client:
        try:
            out.info(f"Adding {domain}...")
            result = client.add_domain(project.site_id, domain) or {}
        except DanubeAPIError as e:
            report_api_error(out, e)
            ctx.exit(1)

    added = StaticSiteDomain.from_dict(result.get("data") or {"id": 0})

    if out.json_output:
        out.output_json(added.to_dict())
        return

    out.success(f"Added {domain}")
    if added.verification_record:
        out.print("\nAdd a CNAME record to verify ownership:")
        out.print(f"  {added.verification_record}", style="cyan")
        out.print(f"\nThen run: danube domains verify {domain}")


@domains.command("remove")
@click.argument("domain")
@click.pass_context
def domains_remove(ctx: Any, domain: str) -> None:
    """Remove a custom domain.

    DOMAIN: Domain name to remove
    """
    out: OutputFormatter = ctx.obj["out"]
    project = require_project(ctx, out)
    token = require_token(ctx, out)

    with DanubeClient(token=token) as client:
        try:
            found = client.find_domain(project.site_id, domain)
            out.info(f"Removing {domain}...")
            client.delete_domain(project.site_id, found.id)
        except DanubeNotFoundError as e:
            out.error(str(e))
            ctx.exit(1)
        except DanubeAPIError as e:
            report_api_error(out, e)
            ctx.exit(1)

    out.success(f"Removed {domain}")


@domains.command("verify")
@click.argument("domain")
@click.pass_context
def domains_verify(ctx: Any, domain: str) -> None:
    """Verify a custom domain.

    DOMAIN: Domain name to verify
    """
    out: OutputFormatter = ctx.obj["out"]
    project = require_project(ctx, out)
    token = require_token(ctx, out)

    with DanubeClient(token=token) as client:
        try:
            found = client.find_domain(project.site_id, domain)
            out.info(f"Verifying {domain}...")
            client.verify_domain(project.site_id, found.id)
        except DanubeNotFoundError as e:
            out.error(str(e))
            ctx.exit(1)
        except DanubeAPIError as e:
            report_api_error(out, e)
            ctx.exit(1)

    out.success(f"Verification started for {domain}")


# =========================
# Version
# =========================


@main.command("version")
@click.pass_context
def version_command(ctx: Any) -> None:
    """Show the installed version and check for updates."""
    out: OutputFormatter = ctx.obj["out"]
    current = get_current_version()
    update = check_for_update()

    if out.json_output:
        out.output_json(
            {
                "version": current,
                "latest": update.latest if update else None,
                "update_available": bool(update and update.update_available),
            }
        )
        return

    out.print(f"danube {current}")
    if update and update.update_available:
        out.warning(f"\nUpdate available: {current} -> {update.latest}")
        out.warning(f"Run `pip install -U {PACKAGE_NAME}` to update")


if __name__ == "__main__":
    main()
