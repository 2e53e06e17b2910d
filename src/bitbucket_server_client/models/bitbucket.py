from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class Project(BaseModel):
    """Bitbucket Server has no team concept, the project plays that role."""

    key: str
    id: int | None = None
    name: str | None = None
    description: str | None = None
    public: bool = False
    type: str | None = None
    links: dict[str, list[dict[str, str]]] | None = None

    def __str__(self):
        return f"Project key={self.key}"


class Repository(BaseModel):
    slug: str
    id: int | None = None
    name: str | None = None
    scmId: str | None = None
    state: str | None = None
    forkable: bool | None = None
    project: Project
    public: bool = False
    links: dict[str, list[dict[str, str]]] | None = None

    @property
    def full_name(self) -> str:
        return f"{self.project.key}/{self.slug}"

    @property
    def is_private(self) -> bool:
        return not self.public

    def clone_links(self) -> dict[str, str]:
        """Clone URLs keyed by protocol name (``http``, ``ssh``)."""
        links = self.links or {}
        return {link["name"]: link["href"] for link in links.get("clone", []) if "name" in link and "href" in link}

    def __str__(self):
        return f"<Repo: {self.full_name}>"


class UserRoleInRepository(StrEnum):
    """Accepted by ``get_repositories`` for parity with the cloud API; ignored here."""

    OWNER = "owner"
    ADMIN = "admin"
    CONTRIBUTOR = "contributor"
    MEMBER = "member"


class User(BaseModel):
    name: str
    id: int | None = None
    active: bool | None = None
    displayName: str | None = None
    slug: str | None = None
    type: str | None = None
    emailAddress: str | None = None


class RefType(StrEnum):
    BRANCH = "BRANCH"
    TAG = "TAG"


class Branch(BaseModel):
    id: str
    displayId: str
    type: RefType = RefType.BRANCH
    latestCommit: str | None = None
    isDefault: bool = False

    @property
    def name(self) -> str:
        return self.displayId

    def __str__(self):
        return self.displayId


class Ref(BaseModel):
    id: str
    displayId: str
    latestCommit: str
    type: RefType | None = None
    repository: Repository | None = None


class ParticipantStatus(StrEnum):
    UNAPPROVED = "UNAPPROVED"
    NEEDS_WORK = "NEEDS_WORK"
    APPROVED = "APPROVED"


class ParticipantRole(StrEnum):
    AUTHOR = "AUTHOR"
    REVIEWER = "REVIEWER"
    PARTICIPANT = "PARTICIPANT"


class Participant(BaseModel):
    user: User
    role: ParticipantRole | None = None
    status: ParticipantStatus | None = None
    approved: bool = False


class PullRequestState(StrEnum):
    DECLINED = "DECLINED"
    MERGED = "MERGED"
    OPEN = "OPEN"


class PullRequest(BaseModel):
    id: int
    title: str
    fromRef: Ref
    toRef: Ref
    state: PullRequestState | None = None
    description: str | None = None
    author: Participant | None = None
    createdDate: int | None = None
    updatedDate: int | None = None
    links: dict[str, list[dict[str, str]]] | None = None

    @property
    def source_branch(self) -> str:
        return self.fromRef.displayId

    @property
    def destination_branch(self) -> str:
        return self.toRef.displayId

    @property
    def source_commit_hash(self) -> str:
        return self.fromRef.latestCommit

    def __str__(self):
        return f"PR #{self.id}: {self.title}"


class Committer(BaseModel):
    name: str | None = None
    emailAddress: str | None = None


class MinimalCommit(BaseModel):
    id: str
    displayId: str | None = None


class Commit(BaseModel):
    id: str
    displayId: str | None = None
    message: str | None = None
    author: Committer | None = None
    authorTimestamp: int | None = None
    committer: Committer | None = None
    committerTimestamp: int | None = None
    parents: list[MinimalCommit] = Field(default_factory=list)

    @property
    def hash(self) -> str:
        return self.id


T = TypeVar("T")


class PagedResult(BaseModel, Generic[T]):
    """One page of a list endpoint. ``nextPageStart`` only matters while ``isLastPage`` is false."""

    values: list[T]
    isLastPage: bool
    nextPageStart: int | None = None
    size: int | None = None
    limit: int | None = None
    start: int | None = None


class BuildState(StrEnum):
    SUCCESSFUL = "SUCCESSFUL"
    FAILED = "FAILED"
    INPROGRESS = "INPROGRESS"


class BuildStatus(BaseModel):
    # keys the endpoint URL, never part of the body
    hash: str = Field(exclude=True)
    state: BuildState
    key: str
    url: str
    name: str | None = None
    description: str | None = None

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


class Webhook(BaseModel):
    url: str
    events: list[str] = Field(default_factory=list)
    id: int | None = None
    name: str | None = None
    active: bool = True
    configuration: dict[str, Any] = Field(default_factory=dict)

    def __str__(self):
        return f"Webhook(name={self.name}, url={self.url})"
