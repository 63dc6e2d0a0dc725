"""ElectroInit run orchestrator and CLI.

Drives one scaffold run:

1. Probe the local Node.js and require npm.
2. Choose the target directory; optionally reuse the cached scaffold.
3. Clear a non-empty target (confirmed, or forced).
4. Ask for the npm mirror and backend flavour.
5. Resolve a compatible Electron version from the release feed.
6. Render and write the scaffold, then ``npm install`` root and frontend.

Usage::

    python -m electroinit
    python -m electroinit --force
    python -m electroinit --target my-app --backend python-fastapi --no-mirror
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.prompt import Confirm, Prompt

from electroinit.config import Config
from electroinit.errors import (
    ElectroInitError,
    FeedUnavailableError,
    NoVersionError,
    UserDeclinedError,
)
from electroinit.installer import InstallRunner, command_runner_for
from electroinit.resolver import (
    MatchKind,
    ReleaseFeedClient,
    RuntimeInfo,
    detect_local_runtime,
    normalize,
    pick_version,
    require_tool,
)
from electroinit.scaffolder import (
    BACKENDS,
    BackendChoice,
    ReusePlan,
    ScaffoldEngine,
    ScaffoldPlan,
    ScaffoldResult,
    TemplateCatalog,
    validate_cache,
)
from electroinit.utils import (
    OSFamily,
    console,
    detect_os_family,
    merged_env,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
    same_path,
    to_package_name,
)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


class Prompter:
    """Asks the user questions on the console.

    With ``assume_defaults`` every question is answered with its default
    without reading input.
    """

    def __init__(self, assume_defaults: bool = False) -> None:
        self.assume_defaults = assume_defaults

    def ask(self, question: str, default: str = "") -> str:
        if self.assume_defaults:
            return default
        answer = Prompt.ask(
            question, default=default, show_default=bool(default), console=console
        )
        return (answer or "").strip() or default

    def confirm(self, question: str, default: bool = False) -> bool:
        if self.assume_defaults:
            return default
        return Confirm.ask(question, default=default, console=console)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class Initializer:
    """Runs one scaffold generation from a frozen ``Config``."""

    def __init__(
        self,
        config: Config,
        prompter: Prompter | None = None,
        *,
        cwd: Path | None = None,
        os_family: OSFamily | None = None,
        feed: ReleaseFeedClient | None = None,
        engine: ScaffoldEngine | None = None,
        installer: InstallRunner | None = None,
    ) -> None:
        self.config = config
        self.prompter = prompter or Prompter(assume_defaults=config.assume_yes or config.force)
        self.cwd = cwd or Path.cwd()
        self.os_family = os_family or detect_os_family()
        self.runner = command_runner_for(self.os_family)
        self.feed = feed or ReleaseFeedClient(config.releases_url, timeout=config.feed_timeout)
        self.engine = engine or ScaffoldEngine(
            TemplateCatalog(
                npm_mirror_registry=config.npm_mirror_registry,
                electron_mirror=config.electron_mirror,
            )
        )
        self.installer = installer or InstallRunner(self.runner, enable_audit=config.enable_audit)

    @property
    def cache_dir(self) -> Path:
        return self.config.resolve(self.config.cache_dir, self.cwd)

    # -- Public API --------------------------------------------------------

    async def run(self) -> ScaffoldResult:
        """Execute the whole run.

        Raises:
            ElectroInitError: For every condition that should end the run
                with exit code 1.
        """
        runtime = await detect_local_runtime(list(self.config.runtime_command))
        if not runtime.known:
            print_warning("Could not detect local Node.js version; Electron match will be unverified.")
        await require_tool("npm", self.runner.argv("npm", "-v"))

        target = self._choose_target()

        if not self.config.force and self.prompter.confirm(
            f"Use cached scaffold from {self.cache_dir}?", False
        ):
            return await self._reuse(target)

        await self.engine.clear_target(
            target, force=self.config.force, confirm=self._confirm_overwrite
        )

        use_mirror = self._choose_mirror()
        backend = self._choose_backend()
        version = await self._resolve_version(runtime)

        if not self.prompter.confirm(f"Install Electron v{version}?", True):
            raise UserDeclinedError("Cancelled by user.")

        plan = ScaffoldPlan(
            target_dir=target,
            project_name=to_package_name(target.name),
            backend=backend,
            use_mirror=use_mirror,
            runtime_version=version,
            os_family=self.os_family,
            enable_audit=self.config.enable_audit,
        )
        result = await self.engine.run(plan)

        env = merged_env({"ELECTRON_MIRROR": self.config.electron_mirror} if use_mirror else None)
        await self.installer.install_all(target, env=env)

        print_summary_table(
            {
                "Target": str(target),
                "Backend": plan.backend.value,
                "Electron": plan.runtime_version,
                "Node.js": runtime.version or "unknown",
                "Mirror": "yes" if use_mirror else "no",
            },
            title="Scaffold",
        )
        print_success(f"Scaffold created at: {target}")
        return result

    # -- Steps -------------------------------------------------------------

    def _choose_target(self) -> Path:
        if self.config.force:
            return self.cache_dir
        if self.config.target:
            return self.config.resolve(self.config.target, self.cwd)
        answer = self.prompter.ask("Target directory", self.config.default_target)
        return self.config.resolve(answer, self.cwd)

    def _confirm_overwrite(self, target: Path) -> bool:
        return self.prompter.confirm(
            f"Target directory is not empty: {target}\nOverwrite?", False
        )

    async def _reuse(self, target: Path) -> ScaffoldResult:
        cache = self.cache_dir
        validate_cache(cache)
        if not same_path(cache, target):
            await self.engine.clear_target(
                target, force=self.config.force, confirm=self._confirm_overwrite
            )

        result = await self.engine.run(
            ReusePlan(cache_dir=cache, target_dir=target, exclude=self.config.copy_ignore)
        )
        if result.in_place:
            print_info(f"Using cached scaffold in place: {cache}")
        else:
            print_success(f"Scaffold copied from {cache} to {target}")
        return result

    def _choose_mirror(self) -> bool:
        if self.config.use_mirror is not None:
            return self.config.use_mirror
        return self.prompter.confirm("Configure npm mirror?", False)

    def _choose_backend(self) -> BackendChoice:
        if self.config.backend:
            return BackendChoice(self.config.backend)

        choices = list(BACKENDS.values())
        print_info("Select backend:")
        for i, backend in enumerate(choices, start=1):
            print_info(f"{i}) {backend.label}")
        answer = self.prompter.ask(f"Enter choice [1-{len(choices)}]", "1")
        try:
            index = int(answer)
        except ValueError:
            index = 1
        index = max(1, min(len(choices), index))
        return choices[index - 1].choice

    async def _resolve_version(self, runtime: RuntimeInfo) -> str:
        """Return the Electron version to pin, marker stripped.

        Raises:
            NoVersionError: If nothing matched and no version was entered.
        """
        if self.config.electron_version is not None:
            pinned = normalize(self.config.electron_version)
            if not pinned:
                raise NoVersionError(
                    f"Invalid Electron version: {self.config.electron_version!r}. Aborting."
                )
            return pinned

        print_info(f"Local Node.js: v{runtime.version}" if runtime.known else "Local Node.js: unknown")
        print_info("Fetching Electron releases...")

        match = None
        try:
            releases = await self.feed.fetch_releases()
        except FeedUnavailableError as exc:
            print_error(str(exc))
        else:
            match = pick_version(releases, runtime.major)

        if match is None:
            print_warning("Could not auto-select Electron version.")
            manual = normalize(
                self.prompter.ask("Enter Electron version manually (e.g. 30.0.0)", "")
            )
            if not manual:
                raise NoVersionError("No Electron version provided. Aborting.")
            print_info(f"Candidate Electron: v{manual} (bundled Node unknown)")
            return manual

        if match.match_kind is MatchKind.LOWER:
            print_warning(
                f"No exact Node {runtime.major} match. "
                f"Using latest Electron with Node {match.runtime}."
            )
        elif match.match_kind is MatchKind.ANY:
            print_warning("No compatible Node match found. Using latest stable Electron.")

        print_info(f"Candidate Electron: v{match.version} (bundled Node {match.runtime})")
        return str(match.version)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="electroinit",
        description="ElectroInit -- Electron + React + Vite project scaffold generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  electroinit                 Interactive scaffold generation\n"
            "  electroinit --force         Rebuild the init_src cache non-interactively\n"
            "  electroinit --audit         Enable npm audit during install\n"
        ),
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Rebuild the cache scaffold, overwriting it and accepting prompt defaults",
    )
    parser.add_argument(
        "--audit",
        action="store_true",
        help="Enable npm audit during dependency installation",
    )
    parser.add_argument(
        "--target",
        default=None,
        help="Target directory (skips the prompt)",
    )
    parser.add_argument(
        "--backend",
        choices=[choice.value for choice in BackendChoice],
        default=None,
        help="Backend flavour (skips the prompt)",
    )
    parser.add_argument(
        "--mirror",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Configure the npm/Electron mirror (skips the prompt)",
    )
    parser.add_argument(
        "--electron-version",
        default=None,
        help="Pin this Electron version instead of resolving one",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Accept the default answer for every prompt",
    )
    return parser


def run(config: Config, prompter: Prompter | None = None) -> int:
    """Run ElectroInit with *config* and return the process exit code."""
    try:
        asyncio.run(Initializer(config, prompter).run())
    except ElectroInitError as exc:
        print_error(str(exc))
        return 1
    except KeyboardInterrupt:
        print_error("Interrupted.")
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``electroinit`` / ``python -m electroinit``."""
    args = build_parser().parse_args(argv)
    try:
        config = Config.from_env().with_args(args)
    except ElectroInitError as exc:
        print_error(str(exc))
        sys.exit(1)
    code = run(config)
    if code == 0:
        print_success("Done.")
    sys.exit(code)


if __name__ == "__main__":
    main()
