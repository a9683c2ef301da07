import os
from pathlib import Path
from typing import Union, List, Iterable

from jinja2 import TemplateError


class ScaffoldError(Exception):
    """Base class for all scaffold exceptions"""

    pass


class ScaffoldTemplateError(ScaffoldError):
    """Generic error raised from within a template"""

    pass


class RegistryError(ScaffoldError):
    """Error for an invalid template catalog"""

    pass


class TemplateNotFoundError(ScaffoldError):
    """Error for a template name that is not in the registry"""

    def __init__(self, name: str, known: Iterable[str] | None = None) -> None:
        super().__init__(f"Template '{name}' not found.")
        self.name = name
        self.known = list(known) if known is not None else []
        if self.known:
            self.add_note(f"Known templates: {', '.join(self.known)}")


class UnresolvedPlaceholderError(ScaffoldError):
    """Error for placeholders in a template body that have no value in the render context"""

    def __init__(self, placeholders: Iterable[str], template: str = None) -> None:
        self.placeholders = sorted(placeholders)
        self.template = template
        super().__init__(str(self))

    def __str__(self) -> str:
        s = "Unresolved placeholder(s)"
        if self.template:
            s += f" in template '{self.template}'"
        s += f": {', '.join(self.placeholders)}"
        return s


class ScaffoldRenderError(ScaffoldError):
    """Generic error for rendering issues"""

    def __init__(self, cause: TemplateError | ScaffoldTemplateError, template: str = None) -> None:
        super().__init__(str(cause))
        self.__cause__ = cause
        self.template = template

    def __str__(self) -> str:
        s = "Error rendering template"
        if self.template:
            s += f" '{self.template}'"
        if hasattr(self.__cause__, "lineno") and self.__cause__.lineno:
            s += f", line {self.__cause__.lineno}"
        s += f": {self.__cause__}"
        return s


class PathEscapeError(ScaffoldError):
    """Error for a template target path that resolves outside the scaffold root"""

    def __init__(self, template: str, path: Union[str, os.PathLike]) -> None:
        super().__init__(f"Template '{template}' target path '{path}' escapes the scaffold root.")
        self.template = template
        self.path = path


class PathConflictError(ScaffoldError):
    """Error for selected templates whose target paths collide or where one file path is another's parent"""

    def __init__(self, path: Union[str, os.PathLike], templates: List[str], message: str = None) -> None:
        super().__init__(message or f"Templates {', '.join(repr(t) for t in templates)} all resolve to '{path}'.")
        self.path = path
        self.templates = templates


class ScaffoldFileError(ScaffoldError):
    """Generic error for file/directory issues"""

    def __init__(
        self,
        message: str = None,
        filepath: Union[str, bytes, os.PathLike] | List[Union[str, bytes, os.PathLike]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.filepath = filepath

        if filepath:
            filepath_note = "Affected filepath(s):\n"
            if isinstance(filepath, (str, bytes, os.PathLike)):
                filepath_note += f"  - {filepath}\n"
            elif isinstance(filepath, list):
                for f in filepath:
                    filepath_note += f"  - {f}\n"
            self.add_note(filepath_note)


class AlreadyExistsError(ScaffoldFileError):
    """Error for target files that exist when the overwrite policy forbids replacing them"""

    def __init__(self, filepath: List[Path]) -> None:
        super().__init__(f"{len(filepath)} target file(s) already exist.", filepath)


class NotAFileError(ScaffoldFileError):
    """Error for a target path that exists but is not a regular file"""

    def __init__(self, filepath: Path) -> None:
        super().__init__(f"Target '{filepath}' exists and is not a regular file.", filepath)


class ScaffoldIOError(ScaffoldFileError):
    """Error for a failed directory creation, write or permission change"""

    def __init__(self, cause: OSError, filepath: Path, template: str = None) -> None:
        super().__init__(f"Failed to write '{filepath}': {cause.strerror or cause}", filepath)
        self.__cause__ = cause
        self.template = template


class ScaffoldValidationErrorGroup(ExceptionGroup):
    """Group of validation errors found before any file was written"""

    def __str__(self) -> str:
        s = ""
        for e in self.exceptions:
            s += f"{e}\n"
            for note in getattr(e, "__notes__", []):
                s += f"{note}"
        s += "\n"
        s += f"{len(self.exceptions)} validation error(s) prevented scaffolding\n"

        return s
