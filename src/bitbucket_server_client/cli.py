import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

import typer

from bitbucket_server_client.config import AppConfig
from bitbucket_server_client.errors import BitbucketError
from bitbucket_server_client.models.bitbucket import BuildState, BuildStatus
from bitbucket_server_client.services import endpoints
from bitbucket_server_client.services.bitbucket_client import BitbucketServerClient

app = typer.Typer(help="Bitbucket Server client", no_args_is_help=True)
auth_app = typer.Typer(help="Authentication commands")
repo_app = typer.Typer(help="Repository commands")
branch_app = typer.Typer(help="Branch commands")
pr_app = typer.Typer(help="Pull request commands")
commit_app = typer.Typer(help="Commit commands")
status_app = typer.Typer(help="Build status commands")
path_app = typer.Typer(help="Repository content commands")
project_app = typer.Typer(help="Project commands")

app.add_typer(auth_app, name="auth")
app.add_typer(repo_app, name="repo")
app.add_typer(branch_app, name="branch")
app.add_typer(pr_app, name="pr")
app.add_typer(commit_app, name="commit")
app.add_typer(status_app, name="build-status")
app.add_typer(path_app, name="path")
app.add_typer(project_app, name="project")

RepoOption = typer.Option(None, "--repo", "-r", help="Repository slug (defaults to BITBUCKET_REPOSITORY)")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _client(repo: str | None = None) -> BitbucketServerClient:
    return BitbucketServerClient.from_config(AppConfig(), repository=repo)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except BitbucketError as exc:
            typer.echo(f"Error: {exc.message}", err=True)
            raise typer.Exit(code=1) from exc

    return wrapper


@auth_app.command("status")
def auth_status() -> None:
    config = AppConfig()
    owner = endpoints.render_owner(config.owner, config.user_centric)
    typer.echo(f"Target Bitbucket: {config.url} (owner {owner})")
    credentials = config.credentials
    if credentials is None:
        typer.echo("Credentials: none, anonymous access")
    else:
        typer.echo(f"Credentials: {credentials.username}")


@repo_app.command("list")
@handle_errors
def repo_list() -> None:
    for repository in _client().get_repositories():
        typer.echo(repository.full_name)


@repo_app.command("show")
@handle_errors
def repo_show(repo: str | None = RepoOption) -> None:
    repository = _client(repo).get_repository()
    if repository is None:
        typer.echo("No repository configured", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{repository.full_name} ({repository.name})")
    for name, href in repository.clone_links().items():
        typer.echo(f"  {name}: {href}")


@repo_app.command("private")
@handle_errors
def repo_private(repo: str | None = RepoOption) -> None:
    typer.echo("private" if _client(repo).is_private() else "public")


@branch_app.command("list")
@handle_errors
def branch_list(repo: str | None = RepoOption) -> None:
    for branch in _client(repo).get_branches():
        marker = "*" if branch.isDefault else " "
        typer.echo(f"{marker} {branch.displayId} {branch.latestCommit or ''}".rstrip())


@pr_app.command("list")
@handle_errors
def pr_list(repo: str | None = RepoOption) -> None:
    for pull_request in _client(repo).get_pull_requests():
        typer.echo(f"#{pull_request.id} {pull_request.source_branch} -> {pull_request.destination_branch}: {pull_request.title}")


@pr_app.command("show")
@handle_errors
def pr_show(pull_request_id: int, repo: str | None = RepoOption) -> None:
    pull_request = _client(repo).get_pull_request_by_id(pull_request_id)
    typer.echo(str(pull_request))
    typer.echo(f"{pull_request.source_branch} -> {pull_request.destination_branch} [{pull_request.state or 'UNKNOWN'}]")


@pr_app.command("source-hash")
@handle_errors
def pr_source_hash(pull_request_id: int, repo: str | None = RepoOption) -> None:
    client = _client(repo)
    typer.echo(client.resolve_source_full_hash(client.get_pull_request_by_id(pull_request_id)))


@commit_app.command("show")
@handle_errors
def commit_show(commit_hash: str, repo: str | None = RepoOption) -> None:
    commit = _client(repo).resolve_commit(commit_hash)
    author = commit.author.name if commit.author else "unknown"
    typer.echo(f"{commit.id} {author}")
    if commit.message:
        typer.echo(commit.message)


@commit_app.command("comment")
@handle_errors
def commit_comment(commit_hash: str, text: str, repo: str | None = RepoOption) -> None:
    _client(repo).post_commit_comment(commit_hash, text)


@status_app.command("post")
@handle_errors
def build_status_post(
    commit_hash: str,
    state: BuildState = typer.Option(..., "--state", case_sensitive=False),
    key: str = typer.Option(..., "--key"),
    url: str = typer.Option(..., "--url"),
    name: str | None = typer.Option(None, "--name"),
    description: str | None = typer.Option(None, "--description"),
) -> None:
    status = BuildStatus(hash=commit_hash, state=state, key=key, url=url, name=name, description=description)
    _client().post_build_status(status)


@path_app.command("exists")
@handle_errors
def path_exists(branch: str, path: str, repo: str | None = RepoOption) -> None:
    if not _client(repo).check_path_exists(branch, path):
        typer.echo(f"{path} not found at {branch}")
        raise typer.Exit(code=1)
    typer.echo(f"{path} exists at {branch}")


@project_app.command("show")
@handle_errors
def project_show() -> None:
    project = _client().get_team()
    if project is None:
        typer.echo("User centric owner, no project")
        return
    typer.echo(f"{project.key}: {project.name or ''}".rstrip())


if __name__ == "__main__":
    app()
