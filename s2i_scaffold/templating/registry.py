import logging
from pathlib import PurePosixPath
from typing import Annotated, Callable, Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

from s2i_scaffold.const import TemplateGroup, TemplateMode
from s2i_scaffold.error import RegistryError, TemplateNotFoundError
from s2i_scaffold.validators import check_duplicates_or_raise

log = logging.getLogger(__name__)


class Template(BaseModel):
    """Model representing a single file the scaffold can generate."""

    model_config = ConfigDict(frozen=True)

    name: Annotated[str, Field(min_length=1, description="Unique name of the template within its registry.")]
    body: Annotated[str, Field(description="Jinja2 source rendered into the generated file.")]
    path: Annotated[
        PurePosixPath,
        Field(description="Target path of the generated file, relative to the scaffold root."),
    ]
    mode: Annotated[TemplateMode, Field(default=TemplateMode.REGULAR, description="Permission class of the file.")]
    group: Annotated[
        TemplateGroup,
        Field(default=TemplateGroup.BUILDER, description="Optional group used to select the template."),
    ]
    description: Annotated[str, Field(default="", description="Short human-readable summary of the file.")]

    @field_validator("path", mode="after")
    @classmethod
    def check_not_empty(cls, path: PurePosixPath) -> PurePosixPath:
        """Ensures the target path names a file. Escapes are checked against the real root at scaffold time."""
        if str(path) in ("", "."):
            raise ValueError("Template path must not be empty.")
        return path


def in_groups(groups: Iterable[TemplateGroup]) -> Callable[[Template], bool]:
    """Returns a predicate selecting templates that belong to any of the given groups"""
    groups = frozenset(groups)
    return lambda template: template.group in groups


class TemplateRegistry:
    """Read-only catalog of templates, kept in declaration order."""

    def __init__(self, templates: Iterable[Template]):
        templates = list(templates)
        try:
            check_duplicates_or_raise(
                templates,
                key_func=lambda t: t.name,
                error_message_func=lambda dupes: f"Duplicate template names in registry: {', '.join(dupes)}",
            )
        except ValueError as e:
            raise RegistryError(str(e)) from e
        self._templates: dict[str, Template] = {t.name: t for t in templates}

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[Template]:
        return iter(self._templates.values())

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __repr__(self) -> str:
        return f"<TemplateRegistry names={self.names}>"

    @property
    def names(self) -> list[str]:
        return list(self._templates.keys())

    def get(self, name: str) -> Template:
        """Returns the template registered under ``name``.

        :raises TemplateNotFoundError: If no template has that name.
        """
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateNotFoundError(name, known=self.names) from None

    def list(self, predicate: Callable[[Template], bool] | None = None) -> list[Template]:
        """Returns templates matching ``predicate`` in declaration order, or all templates if no predicate is given"""
        if predicate is None:
            return list(self._templates.values())
        return [t for t in self._templates.values() if predicate(t)]
