from s2i_scaffold.scaffold.materialize import ScaffoldMaterializer, resolve_target, scaffold
from s2i_scaffold.scaffold.models import FileOutcome, PlannedFile, RenderContext, ScaffoldRequest, ScaffoldResult

__all__ = [
    "FileOutcome",
    "PlannedFile",
    "RenderContext",
    "ScaffoldMaterializer",
    "ScaffoldRequest",
    "ScaffoldResult",
    "resolve_target",
    "scaffold",
]
