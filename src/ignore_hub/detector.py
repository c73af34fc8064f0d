"""
ignore_hub.detector - Project Template Detection
================================================

Guesses which templates fit a project directory by looking for marker
files (``--auto``).

Markers
-------
A marker condition is one of three variants:

- :class:`PathMarker`: a file or directory exists at a relative path
  (``package.json``, ``ProjectSettings/ProjectVersion.txt``);
- :class:`ExtensionMarker`: some file with a given suffix exists within
  ``max_depth`` directory levels (``.tf``, ``.csproj``);
- :class:`PredicateMarker`: an arbitrary check on the project path.

Each variant has its own evaluator, selected in :func:`evaluate_condition`.

A :class:`DetectionRule` holds alternative *combinations* of conditions.
The rule matches when all conditions of at least one combination hold.

Examples
--------
>>> detect_project_templates(Path("."))
['python', 'docker']
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal


# Directories never descended into while searching for extensions
SKIPPED_DIRECTORIES = frozenset({"node_modules", "dist", "build", "coverage", "vendor"})


# =============================================================================
# Marker Conditions
# =============================================================================

@dataclass(frozen=True)
class PathMarker:
    """A relative path that must exist, optionally as a file or directory."""

    path: str
    expected_type: Literal["file", "directory", "any"] = "file"


@dataclass(frozen=True)
class ExtensionMarker:
    """
    A file suffix that must appear somewhere under the project.

    ``max_depth=0`` only looks at the project root itself.
    """

    extension: str
    max_depth: int = 3


@dataclass(frozen=True)
class PredicateMarker:
    """A custom check receiving the project root."""

    test: Callable[[Path], bool]


MarkerCondition = PathMarker | ExtensionMarker | PredicateMarker


@dataclass(frozen=True)
class DetectionRule:
    """
    Detection rule for one template id.

    Attributes
    ----------
    template_id : str
        Query passed on to the resolver (``node``, ``python``).

    combinations : tuple[tuple[MarkerCondition, ...], ...]
        Alternatives; each one is a list of conditions that must all hold.
    """

    template_id: str
    combinations: tuple[tuple[MarkerCondition, ...], ...] = field(default_factory=tuple)


def _files(template_id: str, *paths: str) -> DetectionRule:
    return DetectionRule(template_id, tuple((PathMarker(p),) for p in paths))


def _extensions(template_id: str, *extensions: str, max_depth: int = 3) -> DetectionRule:
    return DetectionRule(
        template_id, tuple((ExtensionMarker(ext, max_depth),) for ext in extensions)
    )


def _dirs(template_id: str, *paths: str) -> DetectionRule:
    return DetectionRule(template_id, tuple((PathMarker(p, "directory"),) for p in paths))


# =============================================================================
# Evaluators
# =============================================================================

def _is_skippable_dir(name: str) -> bool:
    return name.startswith(".") or name.lower() in SKIPPED_DIRECTORIES


def has_file_with_extension(root: Path, extension: str, max_depth: int, depth: int = 0) -> bool:
    """
    Whether a file ending in ``extension`` exists within ``max_depth`` levels.

    Hidden and build/dependency directories are skipped. Unreadable
    directories are treated as empty.
    """
    if depth > max_depth:
        return False

    try:
        entries = list(root.iterdir())
    except OSError:
        return False

    suffix = extension.lower()
    for entry in entries:
        if entry.is_dir():
            if not _is_skippable_dir(entry.name) and has_file_with_extension(
                entry, extension, max_depth, depth + 1
            ):
                return True
        elif entry.is_file() and entry.name.lower().endswith(suffix):
            return True
    return False


def has_root_directory_with_prefix(root: Path, prefixes: tuple[str, ...]) -> bool:
    """Whether ``root`` has a direct subdirectory starting with any prefix."""
    try:
        return any(
            entry.is_dir() and entry.name.startswith(prefixes) for entry in root.iterdir()
        )
    except OSError:
        return False


def _matches_path(project_path: Path, condition: PathMarker) -> bool:
    target = project_path / condition.path
    if condition.expected_type == "file":
        return target.is_file()
    if condition.expected_type == "directory":
        return target.is_dir()
    return target.exists()


def evaluate_condition(project_path: Path, condition: MarkerCondition) -> bool:
    """Evaluate one marker condition against ``project_path``."""
    if isinstance(condition, PathMarker):
        return _matches_path(project_path, condition)
    if isinstance(condition, ExtensionMarker):
        return has_file_with_extension(project_path, condition.extension, condition.max_depth)
    return bool(condition.test(project_path))


def matches_rule(project_path: Path, rule: DetectionRule) -> bool:
    """True when any combination of ``rule`` is fully satisfied."""
    return any(
        all(evaluate_condition(project_path, condition) for condition in combination)
        for combination in rule.combinations
    )


# =============================================================================
# Default Rules
# =============================================================================

def _has_waf_build(project_path: Path) -> bool:
    if has_root_directory_with_prefix(project_path, (".waf-", ".waf3-", "waf-", "waf3-")):
        return True
    return _has_root_file(
        project_path,
        lambda name: name.startswith(".lock-waf_") and name.endswith("_build"),
    )


def _has_rhodes_logs(project_path: Path) -> bool:
    return _has_root_file(project_path, lambda name: name.startswith(("rholog-", "sim-")))


def _has_root_file(project_path: Path, accept: Callable[[str], bool]) -> bool:
    try:
        return any(entry.is_file() and accept(entry.name) for entry in project_path.iterdir())
    except OSError:
        return False


DEFAULT_DETECTION_RULES: tuple[DetectionRule, ...] = (
    # Languages and runtimes
    _files("node", "package.json"),
    _files("javascript", "package.json"),
    _files("bun", "bun.lock"),
    _files("typescript", "tsconfig.json"),
    _extensions("al", ".al", max_depth=4),
    _extensions("actionscript", ".as"),
    _extensions("ada", ".ada", ".adb", ".ads", max_depth=4),
    _extensions("agda", ".agda", ".lagda"),
    _files("dart", "pubspec.yaml"),
    _extensions("d", ".d"),
    _files("clojure", "project.clj", "deps.edn"),
    _extensions("delphi", ".dpr"),
    _files("elixir", "mix.exs"),
    _files("elm", "elm.json"),
    _files("erlang", "rebar.config", "rebar.config.script"),
    _extensions("fortran", ".f", ".for", ".f90"),
    _files("gleam", "gleam.toml"),
    DetectionRule("haskell", (
        (PathMarker("stack.yaml"),),
        (ExtensionMarker(".hs", 4),),
    )),
    _extensions("haxe", ".hx", max_depth=4),
    _extensions("idris", ".idr"),
    _files("go", "go.mod"),
    _files("java", "pom.xml", "build.gradle", "build.gradle.kts"),
    DetectionRule("scala", (
        (PathMarker("build.sbt"),),
        (ExtensionMarker(".scala", 3),),
    )),
    DetectionRule("kotlin", (
        (PathMarker("build.gradle.kts"),),
        (ExtensionMarker(".kt", 4),),
    )),
    _files("rust", "Cargo.toml"),
    _files("python", "requirements.txt", "Pipfile", "pyproject.toml"),
    _files("julia", "Manifest.toml"),
    _extensions("lua", ".lua"),
    _extensions("luau", ".luau"),
    _extensions("nim", ".nim", ".nimble"),
    _files("nix", "default.nix", "flake.nix", "shell.nix"),
    DetectionRule("ocaml", (
        (PathMarker("dune-project"),),
        (ExtensionMarker(".opam", 3),),
    )),
    _extensions("objectivec", ".m", ".mm"),
    _files("perl", "Makefile.PL", "cpanfile"),
    _files("purescript", "spago.dhall"),
    _files("r", "DESCRIPTION"),
    _extensions("racket", ".rkt"),
    DetectionRule("raku", (
        (ExtensionMarker(".raku", 3),),
        (PathMarker("META6.json"),),
    )),
    _files("rescript", "bsconfig.json"),
    _extensions("scheme", ".scm", max_depth=4),
    _files("swift", "Package.swift"),
    _extensions("tex", ".tex", max_depth=4),
    DetectionRule("vba", (
        (ExtensionMarker(".vba", 3),),
        (ExtensionMarker(".vb", 3),),
        (PathMarker("VBA", "directory"),),
    )),
    _files("zig", "build.zig"),
    _files("php", "composer.json"),
    _files("ruby", "Gemfile"),
    # Web frameworks and hosting
    _files("angular", "angular.json"),
    _files("appengine", "app.yaml"),
    _files("firebase", "firebase.json"),
    _dirs("grails", "grails-app"),
    _files("jenkinshome", "Jenkinsfile"),
    _files("jekyll", "_config.yml"),
    _files("laravel", "artisan"),
    DetectionRule("maven", (
        (PathMarker("pom.xml"), PathMarker("src/main/java", "directory")),
    )),
    _files("nestjs", "nest-cli.json"),
    _files("nextjs", "next.config.js"),
    _files("playframework", "conf/application.conf"),
    DetectionRule("rails", (
        (PathMarker("Gemfile"), PathMarker("config/application.rb")),
    )),
    _extensions("sass", ".sass"),
    _files("symfony", "symfony.lock"),
    _extensions("terraform", ".tf"),
    _dirs("typo3", "typo3"),
    _extensions("unrealengine", ".uproject", max_depth=2),
    _extensions("visualstudio", ".sln", max_depth=2),
    _files("wordpress", "wp-config.php"),
    _files("yeoman", ".yo-rc.json"),
    _files("zendframework", "config/application.config.php"),
    _files("docker", "Dockerfile"),
    DetectionRule("unity", (
        (PathMarker("ProjectSettings/ProjectVersion.txt"),),
        (PathMarker("Assets", "directory"), PathMarker("Packages", "directory")),
        (PathMarker("Assets", "directory"), ExtensionMarker(".cs", 2)),
    )),
    _extensions("csharp", ".csproj", max_depth=0),
    # Tools, engines and everything else
    _extensions("adventuregamestudio", ".agf.user", max_depth=6),
    _files("android", "local.properties"),
    _files("appceleratortitanium", "build.log"),
    _files("archlinuxpackages", "PKGBUILD"),
    _files("autotools", "configure"),
    _files("ballerina", "Dependencies.toml"),
    _extensions("c", ".c", ".cpp", max_depth=4),
    _dirs("cfwheels", "db/sql"),
    _files("cmake", "CMakeLists.txt"),
    _extensions("cuda", ".cu", max_depth=4),
    _files("cakephp", "config/app.php"),
    _files("chefcookbook", ".kitchen/local.yml"),
    _dirs("codeigniter", "application/config", "application/logs", "user_guide_src/build"),
    _extensions("commonlisp", ".lisp-temp", max_depth=4),
    _files("composer", "composer.lock"),
    _dirs("concrete5", "application/files"),
    _extensions("coq", ".vo", max_depth=4),
    _dirs("craftcms", "craft/storage"),
    _extensions("dm", ".dmb", max_depth=4),
    _extensions("dotnet", ".sln", max_depth=4),
    _dirs("drupal", "web/sites"),
    _files("episerver", "License.config"),
    _files("eagle", "eagle.epf"),
    _extensions("elisp", ".elc"),
    _files("expressionengine", "system/expressionengine/config/database.php"),
    _files("extjs", "bootstrap.json"),
    _extensions("fancy", ".fyc", max_depth=4),
    _extensions("finale", ".mid", max_depth=4),
    _dirs("flaxengine", "Binaries"),
    DetectionRule("flutter", (
        (PathMarker(".dart_tool", "directory"),),
        (PathMarker(".flutter-plugins"),),
        (PathMarker(".flutter-plugins-dependencies"),),
    )),
    _files("forcedotcom", "salesforce.schema"),
    _dirs("gwt", ".gwt", ".apt_generated", ".gwt-tmp"),
    _dirs("fuelphp", "fuel/app"),
    _extensions("gcov", ".gcov", max_depth=4),
    _dirs("gitbook", ".grunt", "_book"),
    _dirs("githubpages", "_site"),
    _dirs("godot", ".godot"),
    _files("gradle", "gradlew"),
    _extensions("hip", ".ninja_log", max_depth=4),
    _extensions("iar", ".sim", max_depth=4),
    _extensions("igorpro", ".pxp", max_depth=4),
    _dirs("jboss", "jboss/server"),
    _dirs("joomla", "administrator/components"),
    DetectionRule("katalon", (
        (PathMarker(".mtj.tmp", "directory"), PathMarker(".project")),
    )),
    _extensions("kicad", ".kicad_pcb-bak", max_depth=4),
    _dirs("kohana", "application/cache"),
    _extensions("labview", ".lvlibp", max_depth=4),
    _dirs("langchain", ".langgraph_api"),
    _files("leiningen", "project.clj"),
    _files("lemonstand", "boot.php"),
    _extensions("lilypond", ".mid", max_depth=4),
    _dirs("lithium", "libraries", "resources/tmp"),
    _files("magento", "app/etc/local.xml"),
    _extensions("mercury", ".beams", max_depth=4),
    _dirs("metaprogrammingsystem", "source_gen"),
    _extensions("modelsim", ".wlf", max_depth=4),
    _extensions("modelica", ".mo", max_depth=4),
    DetectionRule("nanoc", (
        (PathMarker("output", "directory"),),
        (PathMarker("tmp/nanoc", "directory"),),
        (PathMarker("crash.log"),),
    )),
    _extensions("opa", ".opp", max_depth=4),
    _dirs("opencart", "system/storage"),
    _extensions("oracleforms", ".fmx", max_depth=4),
    _extensions("packer", ".pkrvars.hcl", max_depth=4),
    _dirs("phalcon", "cache", "config/development"),
    _files("plone", "buildout.cfg"),
    _files("prestashop", "config.php"),
    _files("processing", "application.linux64"),
    DetectionRule("qooxdoo", (
        (PathMarker("cache", "directory"),),
        (PathMarker("cache-downloads", "directory"),),
        (PathMarker("source/inspector.html"),),
    )),
    _files("qt", ".qmake.cache"),
    _dirs("ros", "devel"),
    DetectionRule("rhodesrhomobile", (
        (PathMarker("bin/RhoBundle", "directory"),),
        (PredicateMarker(_has_rhodes_logs),),
    )),
    _files("scons", ".sconsign.dblite"),
    _extensions("ssdtsqlproj", ".sqlproj", max_depth=4),
    _dirs("salesforce", ".sfdx"),
    _dirs("scrivener", "QuickLook"),
    _extensions("sdcc", ".lst", max_depth=4),
    _dirs("seamgen", "bootstrap/data", "bootstrap/tmp"),
    _extensions("sketchup", ".skb", max_depth=4),
    _extensions("smalltalk", ".sml", max_depth=4),
    _dirs("solidityremix", "artifacts"),
    _extensions("stella", ".a26", max_depth=4),
    _dirs("sugarcrm", "custom/history"),
    _dirs("symphonycms", "manifest/logs"),
    _extensions("testcomplete", ".tcLogs", max_depth=4),
    _dirs("textpattern", "textpattern"),
    _files("turbogears2", "tox.ini"),
    _dirs("twincat3", "TwinCAT"),
    DetectionRule("vvvv", (
        (PathMarker("workspace.xml"),),
        (PathMarker("bin", "directory"),),
    )),
    DetectionRule("waf", ((PredicateMarker(_has_waf_build),),)),
    _extensions("xojo", ".xojo_uistate", max_depth=4),
    _dirs("yii", "protected/runtime"),
    _dirs("zephir", "ext/build"),
    _extensions("ecutest", ".dbc", max_depth=4),
)


def detect_project_templates(
    project_path: Path,
    rules: tuple[DetectionRule, ...] | list[DetectionRule] = DEFAULT_DETECTION_RULES,
) -> list[str]:
    """
    Template ids whose rules match ``project_path``.

    Parameters
    ----------
    project_path : Path
        Project root to inspect.

    rules : Sequence[DetectionRule]
        Rules to evaluate, in output order.

    Returns
    -------
    list[str]
        Matching template ids in rule order, without duplicates.
    """
    detected: list[str] = []
    for rule in rules:
        if rule.template_id not in detected and matches_rule(project_path, rule):
            detected.append(rule.template_id)
    return detected
