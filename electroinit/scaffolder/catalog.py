"""Catalog of every file a scaffold contains.

Each method returns the content of one generated artifact (or a small group
of them) from nothing but its parameters, so identical inputs always produce
byte-identical output.  That determinism is what lets a cached scaffold stand
in for a freshly rendered one.  Nothing here writes to disk; the
``ScaffoldEngine`` is the only writer of ``FileEntry`` objects.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..config import ELECTRON_MIRROR, NPM_MIRROR_REGISTRY
from ..resolver.semver import normalize
from ..utils import OSFamily
from .templates import TemplateRenderer

if TYPE_CHECKING:
    from .generator import ScaffoldPlan


BACKEND_PORT = 3001
DEV_SERVER_PORT = 5173


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileEntry:
    """One file of the scaffold, relative to the target root."""

    relative_path: str
    content: str | bytes
    executable: bool = False

    @property
    def data(self) -> bytes:
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")


class BackendChoice(str, Enum):
    """Backend flavours a scaffold can be generated with."""

    NODE = "node"
    PYTHON_FASTAPI = "python-fastapi"
    GOLANG_GIN = "golang-gin"


@dataclass(frozen=True)
class Backend:
    """Everything one backend flavour contributes to a scaffold.

    ``manifest_template`` is ``None`` for the plain Node.js responder, which
    has no dependencies of its own.
    """

    choice: BackendChoice
    label: str
    source_template: str
    source_path: str
    manifest_template: str | None
    manifest_path: str | None
    start_command_posix: str
    start_command_windows: str

    def start_command(self, os_family: OSFamily) -> str:
        if os_family is OSFamily.WINDOWS:
            return self.start_command_windows
        return self.start_command_posix


BACKENDS: dict[BackendChoice, Backend] = {
    BackendChoice.NODE: Backend(
        choice=BackendChoice.NODE,
        label="node (default)",
        source_template="backend/node/index.js.j2",
        source_path="src/backend/index.js",
        manifest_template=None,
        manifest_path=None,
        start_command_posix="node src/backend/index.js",
        start_command_windows="node src\\backend\\index.js",
    ),
    BackendChoice.PYTHON_FASTAPI: Backend(
        choice=BackendChoice.PYTHON_FASTAPI,
        label="python-fastapi",
        source_template="backend/python-fastapi/app.py.j2",
        source_path="src/backend/app.py",
        manifest_template="backend/python-fastapi/requirements.txt.j2",
        manifest_path="src/backend/requirements.txt",
        start_command_posix="python src/backend/app.py",
        start_command_windows="python src\\backend\\app.py",
    ),
    BackendChoice.GOLANG_GIN: Backend(
        choice=BackendChoice.GOLANG_GIN,
        label="golang-gin",
        source_template="backend/golang-gin/main.go.j2",
        source_path="src/backend/main.go",
        manifest_template="backend/golang-gin/go.mod.j2",
        manifest_path="src/backend/go.mod",
        start_command_posix="go run src/backend/main.go",
        start_command_windows="go run src\\backend\\main.go",
    ),
}


def get_backend(choice: BackendChoice | str) -> Backend:
    """Return the backend registered for *choice*.

    Raises:
        ValueError: If *choice* names no known backend.
    """
    return BACKENDS[BackendChoice(choice)]


# Frontend template -> output path (relative to src/frontend).
_FRONTEND_FILES: dict[str, str] = {
    "frontend/index.html.j2": "index.html",
    "frontend/vite.config.ts.j2": "vite.config.ts",
    "frontend/tsconfig.json.j2": "tsconfig.json",
    "frontend/tsconfig.node.json.j2": "tsconfig.node.json",
    "frontend/postcss.config.cjs.j2": "postcss.config.cjs",
    "frontend/tailwind.config.ts.j2": "tailwind.config.ts",
    "frontend/components.json.j2": "components.json",
    "frontend/src/main.tsx.j2": "src/main.tsx",
    "frontend/src/App.tsx.j2": "src/App.tsx",
    "frontend/src/index.css.j2": "src/index.css",
    "frontend/src/lib/utils.ts.j2": "src/lib/utils.ts",
    "frontend/src/vite-env.d.ts.j2": "src/vite-env.d.ts",
}

_SCRIPT_NAMES = ("start", "dev", "build", "start-backend")


def _json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2) + "\n"


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TemplateCatalog:
    """Renders the content of every scaffold file."""

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        npm_mirror_registry: str = NPM_MIRROR_REGISTRY,
        electron_mirror: str = ELECTRON_MIRROR,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.npm_mirror_registry = npm_mirror_registry
        self.electron_mirror = electron_mirror

    # -- Root ----------------------------------------------------------------

    def gitignore(self) -> str:
        return self.renderer.render("gitignore.j2")

    def root_package_json(self, project_name: str, electron_version: str) -> str:
        """Root manifest pinning Electron to *electron_version* (marker stripped)."""
        pkg = {
            "name": project_name,
            "version": "0.1.0",
            "private": True,
            "main": "src/electron/main.js",
            "scripts": {
                "electron:dev": "electron .",
                "frontend:build": "npm --prefix src/frontend run build",
            },
            "devDependencies": {
                "electron": normalize(electron_version),
            },
        }
        return _json(pkg)

    def npmrc(self, use_mirror: bool, enable_audit: bool) -> str | None:
        """Return ``.npmrc`` content, or ``None`` when no setting is needed."""
        lines: list[str] = []
        if use_mirror:
            lines.append(f"registry={self.npm_mirror_registry}")
            lines.append(f"electron_mirror={self.electron_mirror}")
        if not enable_audit:
            lines.append("audit=false")
        if not lines:
            return None
        return "\n".join(lines) + "\n"

    def docs_readme(self, project_name: str) -> str:
        return self.renderer.render("docs/README.md.j2", {"project_name": project_name})

    # -- Electron shell ------------------------------------------------------

    def electron_main(self) -> str:
        return self.renderer.render("electron/main.js.j2")

    def electron_preload(self) -> str:
        return self.renderer.render("electron/preload.js.j2")

    # -- Frontend ------------------------------------------------------------

    def frontend_package_json(self, project_name: str) -> str:
        pkg = {
            "name": f"{project_name}-frontend",
            "private": True,
            "version": "0.1.0",
            "type": "module",
            "scripts": {
                "dev": "vite",
                "build": "vite build",
                "preview": "vite preview",
            },
            "dependencies": {
                "react": "^18.3.1",
                "react-dom": "^18.3.1",
                "clsx": "^2.1.1",
                "tailwind-merge": "^2.5.2",
                "class-variance-authority": "^0.7.1",
            },
            "devDependencies": {
                "@types/react": "^18.3.12",
                "@types/react-dom": "^18.3.1",
                "@vitejs/plugin-react": "^4.3.4",
                "autoprefixer": "^10.4.20",
                "postcss": "^8.4.47",
                "tailwindcss": "^3.4.15",
                "tailwindcss-animate": "^1.0.7",
                "typescript": "^5.6.3",
                "vite": "^5.4.10",
            },
        }
        return _json(pkg)

    def frontend_files(self, project_name: str) -> dict[str, str]:
        """Return ``{path relative to src/frontend: content}`` for the frontend."""
        context = {"project_name": project_name, "dev_port": DEV_SERVER_PORT}
        files = {
            output: self.renderer.render(template, context)
            for template, output in _FRONTEND_FILES.items()
        }
        files["package.json"] = self.frontend_package_json(project_name)
        return files

    # -- Backend -------------------------------------------------------------

    def backend_source(self, backend: Backend) -> str:
        return self.renderer.render(backend.source_template, {"backend_port": BACKEND_PORT})

    def backend_manifest(self, backend: Backend, project_name: str) -> str | None:
        """Dependency manifest fragment for *backend*, if it has one."""
        if backend.manifest_template is None:
            return None
        return self.renderer.render(
            backend.manifest_template,
            {"module_name": project_name or "backend"},
        )

    # -- Scripts -------------------------------------------------------------

    def scripts(self, os_family: OSFamily, backend: Backend) -> dict[str, str]:
        """Return ``{script file name: content}`` for *os_family*."""
        folder, ext = ("windows", "ps1") if os_family is OSFamily.WINDOWS else ("posix", "sh")
        context = {
            "dev_port": DEV_SERVER_PORT,
            "start_command": backend.start_command(os_family),
        }
        return {
            f"{name}.{ext}": self.renderer.render(f"scripts/{folder}/{name}.{ext}.j2", context)
            for name in _SCRIPT_NAMES
        }

    # -- Aggregate -----------------------------------------------------------

    def entries(self, plan: "ScaffoldPlan") -> list[FileEntry]:
        """Return every file of the scaffold described by *plan*, sorted by path."""
        backend = get_backend(plan.backend)
        entries: list[FileEntry] = [
            FileEntry(".gitignore", self.gitignore()),
            FileEntry("docs/README.md", self.docs_readme(plan.project_name)),
            FileEntry("src/electron/main.js", self.electron_main()),
            FileEntry("src/electron/preload.js", self.electron_preload()),
            FileEntry(
                "package.json",
                self.root_package_json(plan.project_name, plan.runtime_version),
            ),
            FileEntry(backend.source_path, self.backend_source(backend)),
        ]

        for rel, content in self.frontend_files(plan.project_name).items():
            entries.append(FileEntry(f"src/frontend/{rel}", content))

        manifest = self.backend_manifest(backend, plan.project_name)
        if manifest is not None and backend.manifest_path is not None:
            entries.append(FileEntry(backend.manifest_path, manifest))

        executable = plan.os_family is OSFamily.POSIX
        for name, content in self.scripts(plan.os_family, backend).items():
            entries.append(FileEntry(f"scripts/{name}", content, executable=executable))

        npmrc = self.npmrc(plan.use_mirror, plan.enable_audit)
        if npmrc is not None:
            entries.append(FileEntry(".npmrc", npmrc))

        return sorted(entries, key=lambda e: e.relative_path)
