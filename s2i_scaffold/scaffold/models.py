import re
from pathlib import Path
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from rich.table import Table
from rich.text import Text

from s2i_scaffold.const import (
    DEFAULT_BASE_IMAGE,
    DEFAULT_TEST_PORT,
    REGEX_FULL_IMAGE_TAG_PATTERN,
    REPO_URL_PLACEHOLDER,
    OutcomeStatus,
    OverwritePolicy,
    TemplateGroup,
)
from s2i_scaffold.templating.registry import Template
from s2i_scaffold.validators import check_duplicates_or_raise


class RenderContext(BaseModel):
    """Values substituted into template placeholders for one scaffold invocation.

    Extra keyword arguments become additional placeholders and must be strings.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    image_name: Annotated[str, Field(description="Name of the builder image the scaffold is generated for.")]
    base_image: Annotated[str, Field(default=DEFAULT_BASE_IMAGE, description="Image used in the Dockerfile FROM.")]
    test_port: Annotated[
        str, Field(default=DEFAULT_TEST_PORT, pattern=r"^[0-9]{1,5}$", description="Port the test app listens on.")
    ]
    repo_url: Annotated[
        str, Field(default=REPO_URL_PLACEHOLDER, description="Source repository URL used for image labels.")
    ]

    @field_validator("image_name", "base_image", mode="after")
    @classmethod
    def check_image_reference(cls, value: str) -> str:
        """Ensures the value is a valid container image reference."""
        if not re.match(REGEX_FULL_IMAGE_TAG_PATTERN, value):
            raise ValueError(f"'{value}' is not a valid container image name.")
        return value

    @model_validator(mode="after")
    def check_extra_values(self) -> Self:
        """Ensures extra placeholders are usable template names with string values."""
        for key, value in (self.model_extra or {}).items():
            if not key.isidentifier():
                raise ValueError(f"Placeholder name '{key}' is not a valid identifier.")
            if not isinstance(value, str):
                raise ValueError(f"Placeholder '{key}' must be a string, got {type(value).__name__}.")
        return self

    def to_dict(self) -> dict[str, str]:
        """Returns every placeholder name and value, including extras."""
        return self.model_dump()


class ScaffoldRequest(BaseModel):
    """A request to materialize a set of templates beneath a root directory."""

    root: Annotated[Path, Field(description="Directory the scaffold is generated in. Created if missing.")]
    context: Annotated[RenderContext, Field(description="Values for the template placeholders.")]
    policy: Annotated[
        OverwritePolicy,
        Field(default=OverwritePolicy.FAIL, description="How to handle target files that already exist."),
    ]
    groups: Annotated[
        frozenset[TemplateGroup],
        Field(
            default_factory=lambda: frozenset(TemplateGroup),
            description="Template groups to generate. Ignored when templates are named explicitly.",
        ),
    ]
    templates: Annotated[
        list[str] | None,
        Field(default=None, description="Explicit template names to generate, overriding groups."),
    ]

    @field_validator("root", mode="after")
    @classmethod
    def absolute_root(cls, root: Path) -> Path:
        return root.expanduser().resolve()

    @field_validator("templates", mode="after")
    @classmethod
    def check_unique_templates(cls, templates: list[str] | None) -> list[str] | None:
        if templates is None:
            return templates
        return check_duplicates_or_raise(
            templates,
            key_func=lambda t: t,
            error_message_func=lambda dupes: f"Templates requested more than once: {', '.join(dupes)}",
        )


class PlannedFile(BaseModel):
    """A validated and fully rendered file, ready to be written."""

    template: Template
    path: Path
    content: str
    exists: bool


class FileOutcome(BaseModel):
    """The result of materializing a single template."""

    template: Annotated[str, Field(description="Name of the template.")]
    path: Annotated[Path, Field(description="Absolute path of the target file.")]
    status: Annotated[OutcomeStatus, Field(description="What happened to the target file.")]
    reason: Annotated[str | None, Field(default=None, description="Cause of a failure.")]


class ScaffoldResult(BaseModel):
    """Ordered per-file outcomes of a scaffold request."""

    root: Path
    outcomes: list[FileOutcome] = Field(default_factory=list)
    error: Annotated[str | None, Field(default=None, description="First error that halted the request.")]

    @property
    def failed(self) -> bool:
        return self.error is not None

    def with_status(self, status: OutcomeStatus) -> list[FileOutcome]:
        """Returns the outcomes matching a status, in write order."""
        return [o for o in self.outcomes if o.status == status]

    @property
    def created(self) -> list[FileOutcome]:
        return self.with_status(OutcomeStatus.CREATED)

    @property
    def skipped(self) -> list[FileOutcome]:
        return self.with_status(OutcomeStatus.SKIPPED)

    @property
    def overwritten(self) -> list[FileOutcome]:
        return self.with_status(OutcomeStatus.OVERWRITTEN)

    def table(self) -> Table:
        """Generates a rich table of the file outcomes."""
        status_styles = {
            OutcomeStatus.CREATED: "green3 bold",
            OutcomeStatus.OVERWRITTEN: "yellow bold",
            OutcomeStatus.SKIPPED: "bright_black italic",
            OutcomeStatus.FAILED: "bright_red bold",
        }

        table = Table(title=f"Scaffold {self.root}")
        table.add_column("Template", justify="left")
        table.add_column("Path", justify="left")
        table.add_column("Status", justify="left")
        table.add_column("Reason", justify="left")

        for outcome in self.outcomes:
            try:
                display_path = str(outcome.path.relative_to(self.root))
            except ValueError:
                display_path = str(outcome.path)
            table.add_row(
                outcome.template,
                display_path,
                Text(outcome.status.value, style=status_styles[outcome.status]),
                outcome.reason or "",
            )

        return table
