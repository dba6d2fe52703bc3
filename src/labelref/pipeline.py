"""
Reference Check Pipeline

Ties the label index, environment resolver, reference types, validator and
resolver together:

1. Label indexing → 2. Marker discovery → 3. Validation →
4. Report (broken references, range arity, duplicate labels)

Every operation builds what it needs from the text it is given; nothing is
cached between calls.
"""

from pathlib import Path
from typing import List, Dict, Any, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field
from datetime import datetime
from tqdm import tqdm

from .utils.config import Config
from .utils.logging_utils import CheckerLogger
from .utils.file_utils import safe_json_dump, get_document_files
from .parsers.document import Document, Position
from .parsers.label_patterns import LabelPatternRegistry
from .parsers.label_indexer import Label, LabelIndex, LabelIndexer
from .parsers.environment_resolver import (
    EnvironmentResolver, EnclosingEnvironment, StructureQuery, OrgStructureQuery
)
from .linkers.reference_types import ReferenceTypeRegistry
from .linkers.reference_markers import ReferenceMarker, MarkerParser
from .linkers.reference_validator import ReferenceValidator, LabelValidity
from .linkers.reference_resolver import ReferenceResolver, NavigationTarget, Chooser


@dataclass
class BrokenReference:
    """A marker with at least one label that does not resolve."""
    marker: ReferenceMarker
    position: Optional[Position]
    problems: List[LabelValidity]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "marker": str(self.marker),
            "position": self.position.to_dict() if self.position else None,
            "problems": [p.to_dict() for p in self.problems],
        }


@dataclass
class DocumentReport:
    """Result of checking one document."""
    source: Optional[str]
    num_labels: int = 0
    num_markers: int = 0
    broken: List[BrokenReference] = field(default_factory=list)
    arity_errors: List[Dict[str, Any]] = field(default_factory=list)
    duplicates: List[Label] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.broken and not self.arity_errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "num_labels": self.num_labels,
            "num_markers": self.num_markers,
            "broken": [b.to_dict() for b in self.broken],
            "arity_errors": self.arity_errors,
            "duplicates": [d.to_dict() for d in self.duplicates],
        }


@dataclass
class CheckStats:
    """Statistics for a batch check."""
    start_time: datetime
    end_time: Optional[datetime] = None
    total_docs: int = 0
    checked_docs: int = 0
    failed_docs: int = 0
    total_labels: int = 0
    total_markers: int = 0
    broken_references: int = 0
    reports: List[DocumentReport] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_seconds": (self.end_time - self.start_time).total_seconds() if self.end_time else None,
            "total_docs": self.total_docs,
            "checked_docs": self.checked_docs,
            "failed_docs": self.failed_docs,
            "total_labels": self.total_labels,
            "total_markers": self.total_markers,
            "broken_references": self.broken_references,
            "reports": [r.to_dict() for r in self.reports],
            "failures": self.failures,
        }


class ReferenceCheckPipeline:
    """
    Label indexing, reference validation, navigation and type inference
    over Org documents.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[Config] = None,
        structure_query: Optional[StructureQuery] = None,
        console: bool = True
    ):
        """
        Initialize pipeline with configuration.

        Args:
            config_path: Path to configuration file (ignored if config is given)
            config: Already loaded configuration
            structure_query: Structural node lookup used as the
                environment fallback (defaults to reading #+name: keywords)
            console: Whether to log to the console
        """
        self.config = config or Config(config_path)

        self.logger = CheckerLogger(
            name="labelref",
            log_dir=self.config.paths.get("log_dir"),
            level=self.config.logging.get("level", "INFO"),
            console=console
        )

        self._init_components(structure_query)

    def _init_components(self, structure_query: Optional[StructureQuery]) -> None:
        """Initialize pipeline components."""
        label_cfg = self.config.labels
        ref_cfg = self.config.references

        self.patterns = LabelPatternRegistry()
        self.indexer = LabelIndexer(
            registry=self.patterns,
            context_before=label_cfg.context_lines_before,
            context_after=label_cfg.context_lines_after
        )
        self.environments = EnvironmentResolver(structure_query or OrgStructureQuery())
        self.types = ReferenceTypeRegistry(
            default_type=ref_cfg.default_type,
            environment_resolver=self.environments,
            equation_environments=ref_cfg.equation_environments
        )
        self.markers = MarkerParser(self.types.tags())
        self.validator = ReferenceValidator()
        self.resolver = ReferenceResolver(self.patterns)

    # =========================================================================
    # Core operations
    # =========================================================================

    def build_index(self, document: Union[Document, str]) -> LabelIndex:
        return self.indexer.build_index(document)

    def infer_type(self, label: Union[Label, str], index: LabelIndex) -> str:
        return self.types.infer(label, index)

    def enclosing_environment(
        self, label: Union[Label, str], index: LabelIndex
    ) -> Optional[EnclosingEnvironment]:
        return self.environments.environment_for_label(label, index)

    def validate(
        self,
        marker: Union[ReferenceMarker, Sequence[str]],
        index: LabelIndex
    ) -> List[LabelValidity]:
        return self.validator.validate(marker, index)

    def resolve(self, label_name: str, document: Union[Document, str]) -> Optional[Position]:
        return self.resolver.resolve(label_name, document)

    def navigate(
        self,
        target: Union[str, ReferenceMarker, Sequence[str]],
        document: Union[Document, str],
        chooser: Optional[Chooser] = None
    ) -> NavigationTarget:
        return self.resolver.navigate(target, document, chooser=chooser)

    def list_type_tags(self) -> List[Tuple[str, str]]:
        return self.types.list_tags()

    def describe(self, tag: str) -> str:
        return self.types.describe(tag)

    # =========================================================================
    # Editing support
    # =========================================================================

    def find_markers(self, document: Union[Document, str]) -> List[ReferenceMarker]:
        return self.markers.find_markers(document)

    def label_at(self, document: Union[Document, str], offset: int) -> Optional[Label]:
        return self.indexer.label_at(document, offset)

    def store_reference(
        self,
        document: Union[Document, str],
        offset: int,
        bracketed: bool = True
    ) -> Optional[str]:
        """Marker text referencing the label declared at `offset`, typed by inference."""
        document = Document.coerce(document)
        label = self.label_at(document, offset)
        if label is None:
            return None
        index = self.build_index(document)
        tag = self.infer_type(label.name, index)
        return self.types.get(tag).format_marker([label.name], bracketed=bracketed)

    def label_candidates(self, index: LabelIndex) -> List[Tuple[str, str]]:
        """(name, context) pairs for a label picker."""
        return [(label.name, label.context) for label in index]

    def label_context(self, name: str, index: LabelIndex) -> Optional[str]:
        """Tooltip text for a reference to `name`; None if it is not declared."""
        label = index.get(name)
        if label is None:
            return None
        return label.context

    # =========================================================================
    # Document checks
    # =========================================================================

    def check_document(self, document: Union[Document, str]) -> DocumentReport:
        """Validate every reference marker against one index of the document."""
        document = Document.coerce(document)
        index = self.build_index(document)
        markers = self.find_markers(document)
        report = DocumentReport(
            source=document.path,
            num_labels=len(index),
            num_markers=len(markers),
            duplicates=list(index.duplicates)
        )

        for marker in markers:
            position = document.position(marker.source_range.start) if marker.source_range else None
            problems = [v for v in self.validate(marker, index) if not v.is_valid]
            if problems:
                report.broken.append(BrokenReference(marker, position, problems))

            descriptor = self.types.get(marker.type_tag)
            if not descriptor.check_arity(len(marker.label_path)):
                report.arity_errors.append({
                    "marker": str(marker),
                    "position": position.to_dict() if position else None,
                    "expected": "exactly 2 labels" if descriptor.is_range_flavor else "1 label",
                    "found": len(marker.label_path),
                })

        for broken in report.broken:
            names = ", ".join(
                f"{p.name!r} ({p.status.value})" for p in broken.problems
            )
            where = f"{document.path or '<memory>'}:{broken.position.line}" if broken.position else document.path
            self.logger.debug(f"Broken reference {broken.marker} at {where}: {names}")

        return report

    def check_files(self, paths: Sequence[Union[str, Path]]) -> CheckStats:
        """Check each file; unreadable files are recorded and skipped."""
        stats = CheckStats(start_time=datetime.now(), total_docs=len(paths))

        for path in tqdm(paths, desc="Checking references", disable=len(paths) < 2):
            try:
                document = Document.from_file(path)
            except OSError as e:
                stats.failed_docs += 1
                stats.failures[str(path)] = str(e)
                self.logger.update_metric("docs_failed")
                self.logger.error(f"Failed to read {path}: {e}", exc=e)
                continue

            report = self.check_document(document)
            stats.reports.append(report)
            stats.checked_docs += 1
            stats.total_labels += report.num_labels
            stats.total_markers += report.num_markers
            stats.broken_references += len(report.broken)

            self.logger.update_metric("docs_checked")
            self.logger.update_metric("labels_indexed", report.num_labels)
            self.logger.update_metric("markers_checked", report.num_markers)
            self.logger.update_metric("broken_references", len(report.broken))

            if report.broken:
                self.logger.warning(f"{path}: {len(report.broken)} broken reference(s)")
            for duplicate in report.duplicates:
                self.logger.warning(
                    f"{path}:{duplicate.position.line}: label '{duplicate.name}' declared more than once"
                )

        stats.end_time = datetime.now()
        return stats

    def run(
        self,
        targets: Sequence[Union[str, Path]],
        report_path: Optional[str] = None
    ) -> CheckStats:
        """
        Check files and directories.

        Args:
            targets: Files, or directories searched with the configured patterns
            report_path: Where to save the JSON report (defaults to config)

        Returns:
            Check statistics
        """
        check_cfg = self.config.check
        paths: List[Path] = []
        for target in targets:
            target = Path(target)
            if target.is_dir():
                paths.extend(get_document_files(target, check_cfg.file_patterns, check_cfg.recursive))
            else:
                paths.append(target)

        self.logger.info(f"Checking {len(paths)} document(s)")

        try:
            stats = self.check_files(paths)
        except Exception as e:
            self.logger.error(f"Reference check failed: {e}", exc=e)
            raise

        report_path = report_path or check_cfg.report_path
        if report_path:
            safe_json_dump(stats.to_dict(), report_path)
            self.logger.info(f"Report saved to {report_path}")

        self.logger.log_summary()
        return stats


# =============================================================================
# Convenience functions
# =============================================================================

def build_index(document: Union[Document, str]) -> LabelIndex:
    """Index the labels of a document with default settings."""
    return LabelIndexer().build_index(document)


def infer_type(label: Union[Label, str], index: LabelIndex) -> str:
    """Default reference flavor for a label with default settings."""
    return ReferenceTypeRegistry(
        environment_resolver=EnvironmentResolver(OrgStructureQuery())
    ).infer(label, index)


def validate(marker: Union[ReferenceMarker, Sequence[str]], index: LabelIndex) -> List[LabelValidity]:
    return ReferenceValidator().validate(marker, index)


def resolve(label_name: str, document: Union[Document, str]) -> Optional[Position]:
    return ReferenceResolver().resolve(label_name, document)


def list_type_tags() -> List[Tuple[str, str]]:
    return ReferenceTypeRegistry().list_tags()


def run_check(
    targets: Sequence[Union[str, Path]],
    config_path: Optional[str] = None,
    report_path: Optional[str] = None
) -> CheckStats:
    """
    Convenience function to check documents.

    Args:
        targets: Files or directories to check
        config_path: Path to config file
        report_path: Where to save the JSON report

    Returns:
        Check statistics
    """
    pipeline = ReferenceCheckPipeline(config_path)
    return pipeline.run(targets, report_path=report_path)
