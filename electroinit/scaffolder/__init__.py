"""ElectroInit scaffolder -- renders and writes Electron project skeletons.

The catalog renders every file of an Electron + React/Vite + backend project
from Jinja2 templates; the engine writes them to a target directory or
copies a previously generated scaffold instead.

Quick usage::

    from electroinit.scaffolder import ScaffoldEngine, ScaffoldPlan

    plan = ScaffoldPlan(
        target_dir=Path("my-app"),
        project_name="my-app",
        backend="python-fastapi",
        runtime_version="30.0.0",
    )
    result = await ScaffoldEngine().run(plan)
"""

from electroinit.scaffolder.catalog import (
    BACKENDS,
    Backend,
    BackendChoice,
    FileEntry,
    TemplateCatalog,
    get_backend,
)
from electroinit.scaffolder.generator import (
    SCAFFOLD_DIRS,
    ReusePlan,
    ScaffoldEngine,
    ScaffoldPlan,
    ScaffoldResult,
    ScaffoldState,
    copy_tree,
    validate_cache,
)
from electroinit.scaffolder.templates import TemplateRenderer

__all__ = [
    "BACKENDS",
    "Backend",
    "BackendChoice",
    "FileEntry",
    "ReusePlan",
    "SCAFFOLD_DIRS",
    "ScaffoldEngine",
    "ScaffoldPlan",
    "ScaffoldResult",
    "ScaffoldState",
    "TemplateCatalog",
    "TemplateRenderer",
    "copy_tree",
    "get_backend",
    "validate_cache",
]
