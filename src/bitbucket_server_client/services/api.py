"""Capabilities a source-control backend client offers to the automation layer."""

from typing import Protocol

from bitbucket_server_client.models.bitbucket import (
    Branch,
    BuildStatus,
    Commit,
    Project,
    PullRequest,
    Repository,
    UserRoleInRepository,
    Webhook,
)


class BitbucketApi(Protocol):
    """Implemented once per backend variant; this package ships the server one."""

    @property
    def owner(self) -> str: ...

    @property
    def repository_name(self) -> str | None: ...

    def get_repository(self) -> Repository | None: ...

    def get_repositories(self, role: UserRoleInRepository | None = None) -> list[Repository]: ...

    def get_branches(self) -> list[Branch]: ...

    def get_pull_requests(self) -> list[PullRequest]: ...

    def get_pull_request_by_id(self, pull_request_id: int) -> PullRequest: ...

    def resolve_commit(self, commit_hash: str) -> Commit: ...

    def resolve_source_full_hash(self, pull_request: PullRequest) -> str: ...

    def check_path_exists(self, branch: str, path: str) -> bool: ...

    def post_commit_comment(self, commit_hash: str, comment: str) -> None: ...

    def post_build_status(self, status: BuildStatus) -> None: ...

    def get_team(self) -> Project | None: ...

    def get_webhooks(self) -> list[Webhook]: ...

    def register_commit_webhook(self, hook: Webhook) -> None: ...

    def remove_commit_webhook(self, hook: Webhook) -> None: ...

    def is_private(self) -> bool: ...
