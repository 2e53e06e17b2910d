"""Bitbucket Server API client.

Turns high level operations into REST calls against ``/rest/api/1.0``,
walks paged collections and reports failures as :mod:`bitbucket_server_client.errors`.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from pydantic_core import PydanticSerializationError

from bitbucket_server_client.config import AppConfig, Credentials, ProxySource, env_proxy_source, no_proxy
from bitbucket_server_client.errors import BitbucketError, EncodingError, MissingRepositoryError
from bitbucket_server_client.models.bitbucket import (
    Branch,
    BuildStatus,
    Commit,
    PagedResult,
    Project,
    PullRequest,
    Repository,
    UserRoleInRepository,
    Webhook,
)
from bitbucket_server_client.services import endpoints
from bitbucket_server_client.services.decoding import decode
from bitbucket_server_client.services.pagination import MAX_PAGES, walk_pages
from bitbucket_server_client.services.transport import Payload, Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ClientIdentity:
    """Who the client talks to and as whom.

    ``owner`` is a project key, or a user slug when ``user_centric`` is set.
    ``repository_name`` may be absent for owner level operations.
    """

    base_url: str
    owner: str
    repository_name: str | None = None
    user_centric: bool = False
    credentials: Credentials | None = None


class BitbucketServerClient:
    """Client for one owner (and optionally one repository) on a Bitbucket Server."""

    def __init__(
        self,
        identity: ClientIdentity,
        transport: Transport | None = None,
        proxy_source: ProxySource = no_proxy,
        max_pages: int = MAX_PAGES,
    ) -> None:
        self.identity = identity
        self._transport = transport or Transport(
            base_url=identity.base_url,
            credentials=identity.credentials,
            proxy_source=proxy_source,
        )
        self._max_pages = max_pages

    @classmethod
    def from_config(cls, config: AppConfig, repository: str | None = None) -> "BitbucketServerClient":
        identity = ClientIdentity(
            base_url=config.url,
            owner=config.owner,
            repository_name=repository or config.repository,
            user_centric=config.user_centric,
            credentials=config.credentials,
        )
        return cls(identity, proxy_source=env_proxy_source)

    @property
    def owner(self) -> str:
        return self.identity.owner

    @property
    def repository_name(self) -> str | None:
        return self.identity.repository_name

    @property
    def user_centric_owner(self) -> str:
        """Owner segment for request paths: ``~user`` or the project key."""
        return endpoints.render_owner(self.identity.owner, self.identity.user_centric)

    @property
    def _scoped_repository(self) -> str:
        if self.identity.repository_name is None:
            raise MissingRepositoryError(self.identity.owner)
        return self.identity.repository_name

    def _get(self, path: str, shape: type[T], resource: str) -> T:
        return decode(self._transport.get(path), shape, resource)

    def _get_paged(self, path_at: Callable[[int], str], item: type[T], resource: str) -> list[T]:
        def fetch_page(start: int) -> PagedResult[T]:
            return self._get(path_at(start), PagedResult[item], resource)

        return walk_pages(fetch_page, self._max_pages)

    def _post(self, path: str, payload: Payload, *, operation: str, raise_on_failure: bool) -> None:
        """POST with a per-operation failure policy.

        Encoding failures are always logged and dropped. Request failures are
        raised unless ``raise_on_failure`` is false, in which case they are logged.
        """
        try:
            self._transport.post(path, payload)
        except EncodingError as exc:
            logger.warning("Encoding error posting %s: %s", operation, exc)
        except BitbucketError as exc:
            if raise_on_failure:
                raise
            logger.warning("Failed to post %s: %s", operation, exc)

    def get_repository(self) -> Repository | None:
        if self.repository_name is None:
            return None
        return self._get(
            endpoints.repository(self.user_centric_owner, self.repository_name), Repository, "repository"
        )

    def get_repositories(self, role: UserRoleInRepository | None = None) -> list[Repository]:
        """All repositories of the owner. ``role`` is ignored by Bitbucket Server."""
        owner = self.user_centric_owner
        return self._get_paged(lambda start: endpoints.repositories(owner, start), Repository, "repositories")

    def get_branches(self) -> list[Branch]:
        owner, repository = self.user_centric_owner, self._scoped_repository
        return self._get_paged(lambda start: endpoints.branches(owner, repository, start), Branch, "branches")

    def get_pull_requests(self) -> list[PullRequest]:
        owner, repository = self.user_centric_owner, self._scoped_repository
        return self._get_paged(
            lambda start: endpoints.pull_requests(owner, repository, start), PullRequest, "pull requests"
        )

    def get_pull_request_by_id(self, pull_request_id: int) -> PullRequest:
        return self._get(
            endpoints.pull_request(self.user_centric_owner, self._scoped_repository, pull_request_id),
            PullRequest,
            "pull request",
        )

    def resolve_commit(self, commit_hash: str) -> Commit:
        return self._get(endpoints.commit(self.user_centric_owner, self._scoped_repository, commit_hash), Commit, "commit")

    def resolve_source_full_hash(self, pull_request: PullRequest) -> str:
        return pull_request.source_commit_hash

    def check_path_exists(self, branch: str, path: str) -> bool:
        if self.repository_name is None:
            logger.warning("No repository configured for owner %s, %s treated as missing", self.owner, path)
            return False
        status = self._transport.get_status(endpoints.browse(self.user_centric_owner, self.repository_name, path, branch))
        return status == 200

    def post_commit_comment(self, commit_hash: str, comment: str) -> None:
        self._post(
            endpoints.commit_comments(self.user_centric_owner, self._scoped_repository, commit_hash),
            {"text": comment},
            operation="commit comment",
            raise_on_failure=True,
        )

    def post_build_status(self, status: BuildStatus) -> None:
        try:
            body = status.to_json()
        except PydanticSerializationError as exc:
            logger.warning("Build status serialization error: %s", exc)
            return
        self._post(endpoints.build_status(status.hash), body, operation="build status", raise_on_failure=False)

    def get_team(self) -> Project | None:
        """The owning project; users have no equivalent so user centric clients get None."""
        if self.identity.user_centric:
            return None
        return self._get(endpoints.project(self.owner), Project, "project")

    # Bitbucket Server has no stable webhook API for this client to use.

    def get_webhooks(self) -> list[Webhook]:
        return []

    def register_commit_webhook(self, hook: Webhook) -> None:
        logger.debug("Webhook registration is not supported by Bitbucket Server, ignoring %s", hook)

    def remove_commit_webhook(self, hook: Webhook) -> None:
        logger.debug("Webhook removal is not supported by Bitbucket Server, ignoring %s", hook)

    def is_private(self) -> bool:
        repository = self.get_repository()
        return repository.is_private if repository is not None else False
