"""Install and uninstall starter packs into a project.

Components land in fixed locations (see :func:`component_target_path`) and
every written file is recorded in the :class:`FileRegistry` so uninstall can
tell pristine files from hand-edited ones.
"""
from __future__ import annotations

import logging
import stat
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from zcc.core.context import ProjectContext
from zcc.core.exceptions import ComponentInstallError, ComponentRemovalError, HookNotFoundError, ZccError
from zcc.core.packs.file_registry import FileRegistry
from zcc.core.packs.models import (
    COMPONENT_TYPES,
    PackInstallationResult,
    PackInstallOptions,
    PackManifest,
    PackStructure,
    component_extension,
    component_target_path,
    singular,
)
from zcc.core.packs.sources.base import PackSource
from zcc.core.packs.tool_checker import ToolDependencyChecker
from zcc.core.utils.io import ensure_parent_dir, read_json, remove_empty_dirs, write_json_atomic, write_text
from zcc.core.utils.time import utc_timestamp

logger = logging.getLogger(__name__)


class PackInstaller:
    def __init__(
        self,
        project_root: Path,
        *,
        file_registry: Optional[FileRegistry] = None,
        tool_checker: Optional[ToolDependencyChecker] = None,
        hook_manager=None,
    ) -> None:
        self.context = ProjectContext(project_root)
        self.project_root = self.context.project_root
        self.file_registry = file_registry or FileRegistry(self.project_root)
        self._tool_checker = tool_checker
        self._hook_manager = hook_manager

    @property
    def tool_checker(self) -> ToolDependencyChecker:
        if self._tool_checker is None:
            self._tool_checker = ToolDependencyChecker()
        return self._tool_checker

    @property
    def hook_manager(self):
        if self._hook_manager is None:
            from zcc.core.hooks.manager import HookManager

            self._hook_manager = HookManager(self.project_root)
            self._hook_manager.initialize()
        return self._hook_manager

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    @property
    def packs_manifest_path(self) -> Path:
        return self.context.zcc_dir / "packs.json"

    def snapshot_path(self, pack_name: str) -> Path:
        return self.context.zcc_dir / "packs" / f"{pack_name}.manifest.json"

    def script_target_path(self, file_name: str) -> Path:
        return self.context.zcc_dir / "scripts" / file_name

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------
    def check_conflicts(self, manifest: PackManifest, script_names: Sequence[str] = ()) -> List[str]:
        """Return one message per planned target owned by a different pack."""
        planned: List[Tuple[str, str, Path]] = [
            (singular(ctype).capitalize(), ref.name, component_target_path(self.project_root, ctype, ref.name))
            for ctype, ref in manifest.iter_components()
        ]
        planned += [("Script", name, self.script_target_path(name)) for name in script_names]

        messages: List[str] = []
        for label, name, target in planned:
            for conflict in self.file_registry.check_conflicts([target], manifest.name):
                messages.append(f"{label} '{name}' conflicts with pack '{conflict['existingPack']}'")
        return messages

    def install_pack(
        self,
        pack: PackStructure,
        source: PackSource,
        options: Optional[PackInstallOptions] = None,
    ) -> PackInstallationResult:
        opts = options or PackInstallOptions()
        manifest = pack.manifest
        logger.info("Installing starter pack '%s' v%s", manifest.name, manifest.version)

        try:
            scripts = source.list_pack_files(manifest.name)
        except (OSError, ZccError) as e:
            return PackInstallationResult.failure(f"Failed to read scripts for pack '{manifest.name}': {e}")

        if not opts.dry_run:
            self.context.ensure_structure()

        if not opts.force:
            conflicts = self.check_conflicts(manifest, list(scripts))
            if conflicts:
                return PackInstallationResult.failure(*(f"Conflict: {c}" for c in conflicts))

        self._report_tool_dependencies(manifest, opts)

        result = PackInstallationResult(success=True, post_install_message=manifest.post_install_message)
        written: List[Tuple[Path, str]] = []

        try:
            for ctype in COMPONENT_TYPES:
                self._install_components(ctype, manifest, source, opts, result, written)
            self._install_scripts(scripts, opts, written)

            if not opts.dry_run:
                self._track_written(manifest, written)
                applied = self._apply_configuration(manifest)
                hook_ids = self._configure_hooks(manifest)
                self.file_registry.register_pack(manifest.name, manifest.version)
                self._write_snapshot(manifest, applied, hook_ids)
                self._update_project_manifest(manifest, source.get_source_info())
                self._run_post_install(manifest, opts)
        except Exception as e:
            logger.error("Failed to install pack '%s': %s", manifest.name, e)
            result.errors.append(f"Installation failed: {e}")
            if not opts.dry_run:
                self._track_written(manifest, written, raise_errors=False)

        result.success = not result.errors
        if result.success:
            logger.info("Successfully installed starter pack '%s'", manifest.name)
        else:
            logger.warning("Pack installation completed with %d errors", len(result.errors))
        return result

    def _report_tool_dependencies(self, manifest: PackManifest, opts: PackInstallOptions) -> None:
        if not manifest.tool_dependencies:
            return
        try:
            results = self.tool_checker.check_tool_dependencies(manifest.tool_dependencies, interactive=opts.interactive)
        except Exception as e:
            logger.debug("Tool dependency check failed: %s", e)
            return
        guidance = self.tool_checker.generate_installation_guidance(results)
        if guidance["warningMessage"]:
            logger.warning(guidance["warningMessage"])
            for line in guidance["installationSteps"]:
                if line:
                    logger.info(line)

    def _install_components(
        self,
        ctype: str,
        manifest: PackManifest,
        source: PackSource,
        opts: PackInstallOptions,
        result: PackInstallationResult,
        written: List[Tuple[Path, str]],
    ) -> None:
        kind = singular(ctype)
        for ref in manifest.components_of(ctype):
            if opts.skip_optional and not ref.required:
                logger.debug("Skipping optional %s '%s'", kind, ref.name)
                result.skipped[ctype].append(ref.name)
                continue

            target = component_target_path(self.project_root, ctype, ref.name)
            if target.exists() and not opts.force:
                logger.debug("Component '%s' already exists, skipping", ref.name)
                result.skipped[ctype].append(ref.name)
                continue

            if opts.dry_run:
                logger.info("[DRY RUN] Would install %s '%s'", kind, ref.name)
                result.installed[ctype].append(ref.name)
                continue

            try:
                content = source.read_component(manifest.name, ctype, ref.name)
                write_text(target, content)
            except Exception as e:
                err = ComponentInstallError(f"Failed to install {kind} '{ref.name}': {e}")
                logger.debug("%s", err)
                result.errors.append(str(err))
                continue

            written.append((target, f"{ctype}/{ref.name}{component_extension(ctype)}"))
            result.installed[ctype].append(ref.name)
            logger.debug("Installed %s '%s'", kind, ref.name)

    def _track_written(
        self, manifest: PackManifest, written: List[Tuple[Path, str]], *, raise_errors: bool = True
    ) -> None:
        """Register written files with the file registry, draining ``written``.

        Called again on the failure path so files already on disk stay owned
        by the pack and a retry or uninstall can find them.
        """
        while written:
            target, original = written[0]
            try:
                self.file_registry.register_file(target, manifest.name, original)
            except (OSError, ZccError) as e:
                if raise_errors:
                    raise
                logger.warning("Could not track %s for pack '%s': %s", target, manifest.name, e)
            written.pop(0)

    def _install_scripts(
        self, scripts: Dict[str, bytes], opts: PackInstallOptions, written: List[Tuple[Path, str]]
    ) -> None:
        for file_name, content in scripts.items():
            target = self.script_target_path(file_name)
            if target.exists() and not opts.force:
                logger.debug("Script '%s' already exists, skipping", file_name)
                continue
            if opts.dry_run:
                logger.info("[DRY RUN] Would install script '%s'", file_name)
                continue
            ensure_parent_dir(target)
            target.write_bytes(content)
            if target.suffix == ".sh":
                target.chmod(target.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            written.append((target, f"scripts/{file_name}"))

    def _read_config(self) -> Dict[str, Any]:
        path = self.context.config_path
        try:
            data = read_json(path, default={})
        except (OSError, ValueError) as e:
            logger.warning("Error reading existing config: %s", e)
            return {}
        return data if isinstance(data, dict) else {}

    def _apply_configuration(self, manifest: PackManifest) -> Dict[str, Any]:
        """Shallow-merge pack settings into ``.zcc/config.json``.

        Returns the key/value pairs this pack owns, including ones a previous
        install wrote that still hold the same value.
        """
        if not manifest.configuration:
            return {}
        config = self._read_config()
        applied: Dict[str, Any] = dict(manifest.project_settings)
        if manifest.default_mode and not config.get("defaultMode"):
            applied["defaultMode"] = manifest.default_mode
        previous = self._read_snapshot(manifest.name).get("appliedConfiguration") or {}
        for key, value in dict(previous).items():
            if key not in applied and config.get(key) == value:
                applied[key] = value
        config.update(applied)
        write_json_atomic(self.context.config_path, config)
        logger.debug("Updated project configuration")
        return applied

    def _configure_hooks(self, manifest: PackManifest) -> List[str]:
        if not manifest.hooks:
            return []
        return self.hook_manager.configure_pack_hooks(manifest.name, manifest.hooks)

    def _write_snapshot(self, manifest: PackManifest, applied: Dict[str, Any], hook_ids: List[str]) -> None:
        snapshot = manifest.to_dict()
        snapshot["appliedConfiguration"] = applied
        snapshot["configuredHooks"] = hook_ids
        write_json_atomic(self.snapshot_path(manifest.name), snapshot)

    def load_project_manifest(self) -> Dict[str, Any]:
        """Return ``.zcc/packs.json`` (``{"packs": {...}}``)."""
        try:
            data = read_json(self.packs_manifest_path, default={})
        except (OSError, ValueError) as e:
            logger.warning("Error reading project pack manifest: %s", e)
            data = {}
        if not isinstance(data, dict) or not isinstance(data.get("packs"), dict):
            return {"packs": {}}
        return data

    def _update_project_manifest(self, manifest: PackManifest, source_info: Dict[str, Any]) -> None:
        data = self.load_project_manifest()
        data["packs"][manifest.name] = {
            "version": manifest.version,
            "installedAt": utc_timestamp(),
            "source": source_info,
        }
        write_json_atomic(self.packs_manifest_path, data)
        logger.debug("Updated project pack manifest for '%s'", manifest.name)

    def _run_post_install(self, manifest: PackManifest, opts: PackInstallOptions) -> None:
        # Post-install commands are never executed.
        for command in manifest.post_install_commands:
            logger.warning("Skipping post-install command from pack '%s': %s", manifest.name, command)
        if opts.verbose and manifest.post_install_commands:
            logger.warning("Run the commands above manually if you trust pack '%s'", manifest.name)

    def list_installed_packs(self) -> Dict[str, Dict[str, Any]]:
        return dict(self.load_project_manifest()["packs"])

    def is_installed(self, pack_name: str) -> bool:
        return pack_name in self.load_project_manifest()["packs"] or self.file_registry.has_pack(pack_name)

    # ------------------------------------------------------------------
    # Uninstall
    # ------------------------------------------------------------------
    def uninstall_pack(self, pack_name: str) -> PackInstallationResult:
        """Remove a pack's files, keeping any the user has edited.

        Removed components are reported under ``installed``; kept
        (modified) ones under ``skipped``.
        """
        logger.info("Uninstalling starter pack '%s'", pack_name)
        if not self.is_installed(pack_name):
            return PackInstallationResult.failure(f"Pack '{pack_name}' is not installed")

        result = PackInstallationResult(success=True)
        registry = self.file_registry

        for key in registry.get_pack_files(pack_name):
            info = registry.get_file_info(key) or {}
            original = str(info.get("originalPath") or "")
            bucket = original.split("/", 1)[0]
            label = Path(key).stem if bucket in COMPONENT_TYPES else Path(key).name
            path = registry.absolute(key)

            if not path.exists():
                registry.unregister_file(key)
                continue
            if registry.is_file_modified(key):
                logger.warning("Keeping modified file %s", key)
                if bucket in COMPONENT_TYPES:
                    result.skipped[bucket].append(label)
                continue
            try:
                path.unlink()
                registry.unregister_file(key)
            except OSError as e:
                err = ComponentRemovalError(f"Failed to remove {singular(bucket) if bucket in COMPONENT_TYPES else 'file'} '{label}': {e}")
                result.errors.append(str(err))
                continue
            if bucket in COMPONENT_TYPES:
                result.installed[bucket].append(label)

        preserved = registry.unregister_pack_preserving_modified(pack_name)
        if preserved:
            logger.info("Preserved %d modified file(s) from pack '%s'", len(preserved), pack_name)

        remove_empty_dirs(
            [
                self.context.zcc_dir / "modes",
                self.context.zcc_dir / "workflows",
                self.context.zcc_dir / "scripts",
                self.context.hooks_dir / "definitions",
                self.context.claude_dir / "agents",
            ]
        )

        snapshot = self._read_snapshot(pack_name)
        self._revert_configuration(pack_name, snapshot)
        self._remove_pack_hooks(snapshot, result)
        snapshot_path = self.snapshot_path(pack_name)
        if snapshot_path.exists():
            snapshot_path.unlink()

        data = self.load_project_manifest()
        if data["packs"].pop(pack_name, None) is not None:
            write_json_atomic(self.packs_manifest_path, data)

        result.success = not result.errors
        return result

    def _read_snapshot(self, pack_name: str) -> Dict[str, Any]:
        try:
            data = read_json(self.snapshot_path(pack_name), default={})
        except (OSError, ValueError) as e:
            logger.warning("Could not read manifest snapshot for '%s': %s", pack_name, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _revert_configuration(self, pack_name: str, snapshot: Dict[str, Any]) -> None:
        if "appliedConfiguration" in snapshot:
            added = dict(snapshot.get("appliedConfiguration") or {})
        else:
            configuration = snapshot.get("configuration") or {}
            added = dict(configuration.get("projectSettings") or {})
            if configuration.get("defaultMode"):
                added["defaultMode"] = configuration["defaultMode"]
        if not added or not self.context.config_path.exists():
            return

        config = self._read_config()
        removed = [k for k, v in added.items() if k in config and config[k] == v]
        for key in removed:
            del config[key]
        if removed:
            write_json_atomic(self.context.config_path, config)
            logger.debug("Removed %d configuration key(s) added by '%s'", len(removed), pack_name)

    def _remove_pack_hooks(self, snapshot: Dict[str, Any], result: PackInstallationResult) -> None:
        hook_ids = [str(h) for h in snapshot.get("configuredHooks") or []]
        if not hook_ids:
            return
        for hook_id in hook_ids:
            try:
                self.hook_manager.remove_hook(hook_id)
            except HookNotFoundError:
                logger.debug("Hook '%s' already removed", hook_id)
            except ZccError as e:
                result.errors.append(str(ComponentRemovalError(f"Failed to remove hook '{hook_id}': {e}")))


__all__ = ["PackInstaller"]
