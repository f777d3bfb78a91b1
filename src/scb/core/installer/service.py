"""
Installation planner and executor.

Analyzes a target directory, classifies the run (new, core update, full
overwrite), builds an InstallationPlan, and executes it:

    validate plan -> backup -> fetch source -> pre-install script
    -> copy framework files -> integration dirs + symlinks -> settings merge
    -> Codex config -> post-install script -> ignore files -> provenance
    -> post-install validation

The fetched scratch directory is always handed back to the source provider
for removal, whatever happens in between.

Usage:
    >>> installer = Installer()
    >>> plan = installer.analyze(InstallConfig(target_dir=Path(".")))
    >>> result = installer.execute(plan, config)
"""

from __future__ import annotations

import logging
from pathlib import Path

from scb import __version__
from scb.core.config.constants import (
    FRAMEWORK_DIR,
    FRAMEWORK_SUBDIRS,
    INTEGRATION_LAYOUTS,
    POST_INSTALL_SCRIPT,
    PRE_INSTALL_SCRIPT,
    TEMPLATE_INFO_FILE,
    USER_PRESERVED_DIRS,
)
from scb.core.config.models import InstallConfig
from scb.core.errors import InstallationError, InstallerError, ScriptError, filesystem_error
from scb.core.filesystem import (
    backup_dir_path,
    backup_directory,
    copy_tree,
    create_directory,
    remove_named_directory,
    replace_directories,
)
from scb.core.installer.codex import install_codex_config
from scb.core.installer.gitignore import apply_gitignore_policy
from scb.core.installer.models import (
    InstallationPlan,
    InstallationType,
    InstallResult,
    classify_installation,
)
from scb.core.settings.service import SettingsService
from scb.core.sources.git import GitSourceProvider
from scb.core.sources.provider import SourceProvider
from scb.core.sources.scripts import ScriptRunner
from scb.core.status.detector import StatusDetector
from scb.core.status.models import InstallationState
from scb.core.symlinks.manager import SymlinkManager
from scb.core.templates.models import TemplateInfo
from scb.core.templates.registry import get_template

logger = logging.getLogger(__name__)


class Installer:
    """
    Plans and performs framework installations.

    Collaborators are injectable; defaults talk to git, bash and the local
    filesystem.
    """

    def __init__(
        self,
        source_provider: SourceProvider | None = None,
        script_runner: ScriptRunner | None = None,
        symlinks: SymlinkManager | None = None,
        settings: SettingsService | None = None,
        detector: StatusDetector | None = None,
    ) -> None:
        self.source_provider = source_provider
        self.script_runner = script_runner or ScriptRunner()
        self.symlinks = symlinks or SymlinkManager()
        self.settings = settings or SettingsService()
        self.detector = detector or StatusDetector()

    # =========================================================================
    # Planning
    # =========================================================================

    def analyze(self, config: InstallConfig) -> InstallationPlan:
        """
        Build an installation plan without touching the disk.

        Raises:
            ConfigValidationError: If the options contradict each other
            NotFoundError: If the target does not exist or the template is unknown
        """
        config.validate()
        state = self.detector.check_installation(config.target_dir)
        template = get_template(config.template_id)
        installation_type = classify_installation(
            config.force, config.force_core, state.is_installed
        )

        plan = InstallationPlan(
            target_dir=state.target_dir,
            installation_type=installation_type,
            template=template,
            is_installed=state.is_installed,
        )
        target = Path(state.target_dir)

        self._analyze_conflicts(plan, target)
        self._analyze_file_operations(plan, target)
        self._analyze_directory_operations(plan, state)
        self._analyze_symlink_operations(plan, target)

        if template.deprecated:
            plan.add_warning(f"Template '{template.id}' is deprecated")
        if state.is_installed and not (config.force or config.force_core):
            plan.add_warning("An existing installation will be fully replaced")
        if installation_type == InstallationType.UPDATE and not state.framework_dir_exists:
            plan.add_warning(
                f"No existing {FRAMEWORK_DIR} found; only core framework directories "
                f"will be installed"
            )

        if not config.no_backup and plan.will_replace:
            plan.backup_required = True
            plan.backup_dir = str(backup_dir_path(target))

        logger.debug(
            f"Planned {installation_type.value} install in {target}: "
            f"create={plan.will_create} replace={plan.will_replace}"
        )
        return plan

    @staticmethod
    def _analyze_conflicts(plan: InstallationPlan, target: Path) -> None:
        for name in (FRAMEWORK_DIR, *(layout.dirname for layout in INTEGRATION_LAYOUTS)):
            path = target / name
            if (path.exists() or path.is_symlink()) and not path.is_dir():
                plan.add_error(f"{name} exists but is not a directory")

    @staticmethod
    def _analyze_file_operations(plan: InstallationPlan, target: Path) -> None:
        framework_dir = target / FRAMEWORK_DIR

        if plan.installation_type == InstallationType.NEW:
            plan.will_create.append(FRAMEWORK_DIR)
        elif plan.installation_type == InstallationType.UPDATE:
            for name in FRAMEWORK_SUBDIRS:
                relative = f"{FRAMEWORK_DIR}/{name}"
                if (framework_dir / name).exists():
                    plan.will_replace.append(relative)
                else:
                    plan.will_create.append(relative)
            # listed whether or not they exist yet
            plan.will_preserve.extend(f"{FRAMEWORK_DIR}/{name}" for name in USER_PRESERVED_DIRS)
        elif framework_dir.exists():
            plan.will_replace.append(FRAMEWORK_DIR)
        else:
            plan.will_create.append(FRAMEWORK_DIR)

    @staticmethod
    def _analyze_directory_operations(plan: InstallationPlan, state: InstallationState) -> None:
        for layout in INTEGRATION_LAYOUTS:
            if state.integration_dirs.get(layout.dirname, False):
                continue
            plan.directories_to_create.append(layout.dirname)
            plan.directories_to_create.extend(f"{layout.dirname}/{sub}" for sub in layout.subdirs)

    @staticmethod
    def _analyze_symlink_operations(plan: InstallationPlan, target: Path) -> None:
        for layout in INTEGRATION_LAYOUTS:
            for spec in layout.symlinks:
                relative = f"{layout.dirname}/{spec.name}"
                link = target / relative
                if link.exists() or link.is_symlink():
                    plan.symlinks_to_update.append(relative)
                else:
                    plan.symlinks_to_create.append(relative)

    # =========================================================================
    # Execution
    # =========================================================================

    def install(self, config: InstallConfig) -> InstallResult:
        """Analyze and execute in one step."""
        return self.execute(self.analyze(config), config)

    def execute(self, plan: InstallationPlan, config: InstallConfig) -> InstallResult:
        """
        Carry out a plan.

        Raises:
            InstallationError: If the plan has errors, a load-bearing step
                fails, or the result does not validate
            InstallerError: For filesystem, source and permission failures
        """
        if not plan.is_valid():
            raise InstallationError(
                f"installation plan has errors: {'; '.join(plan.errors)}",
                context={"operation": "install", "path": plan.target_dir},
            )

        target = Path(plan.target_dir)
        result = InstallResult(
            target_dir=plan.target_dir,
            installation_type=plan.installation_type,
            template_id=plan.template.id,
            installed_commit=plan.template.commit,
        )

        if plan.backup_required and plan.backup_dir:
            backup_directory(target / FRAMEWORK_DIR, Path(plan.backup_dir))
            result.backup_dir = plan.backup_dir

        provider = self.source_provider or GitSourceProvider(timeout=config.git_timeout)
        source_dir = provider.fetch(plan.template)
        try:
            self._install_from_source(plan, config, source_dir, result)
        finally:
            try:
                provider.cleanup(source_dir)
                result.temp_cleaned = True
            except (InstallerError, OSError) as e:
                logger.warning(f"Failed to clean up temporary directory {source_dir}: {e}")

        logger.info(f"Installed template {plan.template.id} into {target}")
        return result

    def _install_from_source(
        self,
        plan: InstallationPlan,
        config: InstallConfig,
        source_dir: Path,
        result: InstallResult,
    ) -> None:
        target = Path(plan.target_dir)
        source_framework = source_dir / FRAMEWORK_DIR
        if not source_framework.is_dir():
            raise InstallationError(
                f"template {plan.template.id} does not contain {FRAMEWORK_DIR}",
                context={"operation": "install", "path": str(source_dir)},
            )

        has_pre = self.script_runner.exists(source_dir, PRE_INSTALL_SCRIPT)
        has_post = self.script_runner.exists(source_dir, POST_INSTALL_SCRIPT)

        if has_pre:
            try:
                self.script_runner.run(source_dir, target, PRE_INSTALL_SCRIPT)
            except ScriptError as e:
                raise InstallationError(
                    "pre-install script failed",
                    cause=e,
                    context={"operation": "pre-install", "path": str(target)},
                ) from e
            result.pre_install_ran = True

        self._apply_framework_files(plan.installation_type, source_framework, target / FRAMEWORK_DIR)
        self.symlinks.create_all(target)

        settings_path = self.settings.process_settings(target)
        result.settings_file = str(settings_path) if settings_path else None

        install_codex_config(target)

        if has_post:
            try:
                self.script_runner.run(source_dir, target, POST_INSTALL_SCRIPT)
                result.post_install_ran = True
            except ScriptError as e:
                logger.warning(f"Post-install script failed: {e}")
                result.warnings.append(f"Post-install script failed: {e}")

        result.warnings.extend(apply_gitignore_policy(source_dir, target, config.gitignore_mode))
        self._save_template_info(target, plan)
        self.validate_installation(target)

    @staticmethod
    def _apply_framework_files(
        installation_type: InstallationType, source: Path, destination: Path
    ) -> None:
        if installation_type == InstallationType.NEW:
            copy_tree(source, destination)
        elif installation_type == InstallationType.OVERWRITE:
            remove_named_directory(destination, FRAMEWORK_DIR)
            copy_tree(source, destination)
        else:
            replaced = replace_directories(source, destination, FRAMEWORK_SUBDIRS)
            logger.debug(f"Replaced framework directories: {replaced}")
            for name in USER_PRESERVED_DIRS:
                create_directory(destination / name)

    @staticmethod
    def _save_template_info(target: Path, plan: InstallationPlan) -> None:
        info = TemplateInfo(
            template=plan.template,
            installed_commit=plan.template.commit,
            metadata={
                "cli_version": __version__,
                "installation_type": plan.installation_type.value,
            },
        )
        path = target / FRAMEWORK_DIR / TEMPLATE_INFO_FILE
        try:
            path.write_text(info.model_dump_json(indent=2) + "\n")
        except OSError as e:
            raise filesystem_error("write template info", path, e) from e

    def validate_installation(self, target: Path) -> None:
        """
        Raises:
            InstallationError: If the target is not cleanly installed
        """
        state = self.detector.check_installation(target)
        if not state.is_installed:
            raise InstallationError(
                "installation validation failed: framework not detected after install",
                context={"operation": "validate", "path": str(target)},
            )
        if state.issues:
            raise InstallationError(
                f"installation validation failed: {'; '.join(state.issues)}",
                context={"operation": "validate", "path": str(target), "issues": state.issues},
            )
