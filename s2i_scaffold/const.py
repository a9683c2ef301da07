from enum import Enum

APP_NAME = "s2i-scaffold"
ENV_VAR_PREFIX = "S2I_SCAFFOLD"


class OverwritePolicy(str, Enum):
    """Enum for handling generated files that already exist in the destination."""

    FAIL = "fail-if-exists"
    SKIP = "skip-if-exists"
    OVERWRITE = "overwrite"


class TemplateMode(str, Enum):
    """Enum for the permission class of a generated file."""

    EXECUTABLE = "executable"
    REGULAR = "regular"

    @property
    def bits(self) -> int:
        if self is TemplateMode.EXECUTABLE:
            return 0o755
        return 0o644


class TemplateGroup(str, Enum):
    """Enum for the optional groups a template can be selected by."""

    BUILDER = "builder"
    TESTS = "tests"


class OutcomeStatus(str, Enum):
    """Enum for the result of materializing a single template."""

    CREATED = "created"
    SKIPPED = "skipped"
    OVERWRITTEN = "overwritten"
    FAILED = "failed"


REGEX_FULL_IMAGE_TAG_PATTERN = (
    r"^(?P<repository>[\w.\-_]+((?::\d+|)(?=/[a-z0-9._-]+/[a-z0-9._-]+))|)"
    r"(?:/|)(?P<image>[a-z0-9.\-_]+(?:/[a-z0-9.\-_]+|))(:(?P<tag>[\w.\-_]{1,127})|)$"
)
REGEX_IMAGE_TAG_SUFFIX_ALLOWED_CHARACTERS_PATTERN = r"[^a-zA-Z0-9_\-.]"

DEFAULT_BASE_IMAGE = "registry.access.redhat.com/ubi9/s2i-base"
DEFAULT_TEST_PORT = "8080"
REPO_URL_PLACEHOLDER = "<REPLACE ME>"
