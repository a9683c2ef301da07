import logging
import os
import tempfile
from pathlib import Path

from s2i_scaffold.const import OutcomeStatus, OverwritePolicy
from s2i_scaffold.error import (
    AlreadyExistsError,
    NotAFileError,
    ScaffoldFileError,
    PathConflictError,
    PathEscapeError,
    ScaffoldIOError,
    ScaffoldRenderError,
    ScaffoldValidationErrorGroup,
    UnresolvedPlaceholderError,
)
from s2i_scaffold.scaffold.models import FileOutcome, PlannedFile, ScaffoldRequest, ScaffoldResult
from s2i_scaffold.templating.catalog import DEFAULT_REGISTRY
from s2i_scaffold.templating.registry import Template, TemplateRegistry, in_groups
from s2i_scaffold.templating.render import Renderer
from s2i_scaffold.validators import find_duplicates

log = logging.getLogger(__name__)


def resolve_target(root: Path, template: Template) -> Path:
    """Returns the absolute target path of a template beneath ``root``.

    :raises PathEscapeError: If the path is absolute or resolves outside of ``root``, including through symlinks.
    """
    if template.path.is_absolute() or ".." in template.path.parts:
        raise PathEscapeError(template.name, template.path)
    target = (root / template.path).resolve()
    if not target.is_relative_to(root.resolve()):
        raise PathEscapeError(template.name, template.path)
    return target


def find_blocking_parent(root: Path, target: Path) -> Path | None:
    """Returns the first existing directory component between ``root`` and ``target`` that is not a directory"""
    for parent in reversed(target.parents):
        if parent.is_relative_to(root) and parent.exists() and not parent.is_dir():
            return parent
    return None


class ScaffoldMaterializer:
    """Turns scaffold requests into files on disk.

    Every request is validated and rendered in memory first. Nothing is written unless the whole request is valid.
    """

    def __init__(self, registry: TemplateRegistry, renderer: Renderer | None = None):
        self.registry = registry
        self.renderer = renderer or Renderer()

    def select(self, request: ScaffoldRequest) -> list[Template]:
        """Returns the templates a request asks for, in declaration order for group selections.

        :raises TemplateNotFoundError: If an explicitly named template is not registered.
        """
        if request.templates is not None:
            return [self.registry.get(name) for name in request.templates]
        return self.registry.list(in_groups(request.groups))

    def plan(self, request: ScaffoldRequest) -> list[PlannedFile]:
        """Validates and renders every selected template without touching the filesystem.

        All problems are collected before raising so they can be fixed in one pass.

        :raises TemplateNotFoundError: If an explicitly named template is not registered.
        :raises ScaffoldValidationErrorGroup: If any template fails validation.
        """
        templates = self.select(request)
        context = request.context.to_dict()
        errors: list[Exception] = []
        targets: dict[str, Path] = {}

        for template in templates:
            try:
                targets[template.name] = resolve_target(request.root, template)
            except PathEscapeError as e:
                errors.append(e)

        conflicts = find_duplicates(list(targets.items()), key_func=lambda item: item[1])
        for path, items in conflicts.items():
            errors.append(PathConflictError(path, [name for name, _ in items]))
        # A file target cannot also be a parent directory of another target
        for outer, outer_path in targets.items():
            for inner, inner_path in targets.items():
                if outer_path != inner_path and inner_path.is_relative_to(outer_path):
                    message = f"Template '{outer}' writes '{outer_path}' but '{inner}' needs it as a directory."
                    errors.append(PathConflictError(outer_path, [outer, inner], message=message))

        planned: list[PlannedFile] = []
        existing: list[Path] = []
        blocked: set[Path] = set()
        for template in templates:
            try:
                content = self.renderer.render(template.body, context, name=template.name)
            except (UnresolvedPlaceholderError, ScaffoldRenderError) as e:
                errors.append(e)
                continue

            target = targets.get(template.name)
            if target is None:
                continue
            blocker = find_blocking_parent(request.root, target)
            if blocker is not None:
                if blocker not in blocked:
                    blocked.add(blocker)
                    errors.append(ScaffoldFileError(f"'{blocker}' exists and is not a directory.", blocker))
                continue
            exists = target.exists()
            if exists and not target.is_file():
                errors.append(NotAFileError(target))
                continue
            if exists:
                existing.append(target)
            planned.append(PlannedFile(template=template, path=target, content=content, exists=exists))

        if existing and request.policy == OverwritePolicy.FAIL:
            errors.append(AlreadyExistsError(existing))

        if errors:
            log.error(f"Scaffold request for [bold]{request.root}[/bold] failed validation")
            raise ScaffoldValidationErrorGroup("Scaffold validation failed", errors)

        return planned

    @staticmethod
    def write_file(planned: PlannedFile) -> None:
        """Writes rendered content to a temporary sibling and moves it into place with the template's mode bits.

        :raises OSError: If the directory, file or mode cannot be created.
        """
        planned.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=planned.path.parent, prefix=f".{planned.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(planned.content)
            os.chmod(tmp_name, planned.template.mode.bits)
            os.replace(tmp_name, planned.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def materialize(self, request: ScaffoldRequest) -> ScaffoldResult:
        """Validates a request and writes its files.

        Writes stop at the first filesystem error. Files written before the error are kept and the result records
        the failure.

        :raises TemplateNotFoundError: If an explicitly named template is not registered.
        :raises ScaffoldValidationErrorGroup: If any template fails validation. No file is written in that case.
        """
        planned_files = self.plan(request)
        result = ScaffoldResult(root=request.root)

        for planned in planned_files:
            name = planned.template.name
            if planned.exists and request.policy == OverwritePolicy.SKIP:
                log.info(f"Skipping existing file [bold]{planned.path}")
                result.outcomes.append(FileOutcome(template=name, path=planned.path, status=OutcomeStatus.SKIPPED))
                continue

            status = OutcomeStatus.OVERWRITTEN if planned.exists else OutcomeStatus.CREATED
            try:
                log.debug(f"Writing [bold]{planned.path}")
                self.write_file(planned)
            except OSError as e:
                error = ScaffoldIOError(e, planned.path, template=name)
                log.error(str(error))
                result.outcomes.append(
                    FileOutcome(template=name, path=planned.path, status=OutcomeStatus.FAILED, reason=str(error))
                )
                result.error = str(error)
                break
            result.outcomes.append(FileOutcome(template=name, path=planned.path, status=status))

        return result


def scaffold(request: ScaffoldRequest, registry: TemplateRegistry = DEFAULT_REGISTRY) -> ScaffoldResult:
    """Materializes a scaffold request against a registry, the shipped catalog by default."""
    return ScaffoldMaterializer(registry).materialize(request)
