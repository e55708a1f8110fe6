"""Import graph over a solc standard-json input and minimal input derivation."""

import copy
import logging
import posixpath
import re
from typing import Any, Dict, List, Optional, Set, Tuple

from ..errors import UnexpectedNumberOfFilesError

logger = logging.getLogger(__name__)

# String literals are matched first so that "//" or "/*" inside them is kept
COMMENT_PATTERN = re.compile(r'("(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\')|//[^\n]*|/\*.*?\*/', re.DOTALL)
# import "a.sol"; import "a.sol" as A; import * as A from "a.sol"; import {A, B as C} from "a.sol";
IMPORT_PATTERN = re.compile(r'\bimport\s+(?:[^;"\']*?\bfrom\s+)?["\']([^"\']+)["\']')


def _parse_remappings(remappings: List[str]) -> List[Tuple[str, str, str]]:
    """Parse "context:prefix=target" entries, longest prefix first."""
    parsed = []
    for remapping in remappings or []:
        if "=" not in remapping:
            continue
        left, target = remapping.split("=", 1)
        context, _, prefix = left.rpartition(":")
        parsed.append((context, prefix, target))
    parsed.sort(key=lambda r: (len(r[0]), len(r[1])), reverse=True)
    return parsed


class DependencyGraph:
    """Directed import graph between the source units of a compiler input."""

    def __init__(self, edges: Dict[str, Set[str]]):
        self._edges = edges


    @classmethod
    def from_compiler_input(
        cls,
        compiler_input: Dict[str, Any],
        output_sources: Optional[Dict[str, Any]] = None,
    ) -> "DependencyGraph":
        """
        Build the graph from a standard-json input.

        Imports come from the AST of the compiler output when available,
        since solc already resolved them. Otherwise they are parsed from the
        source text and resolved against the importing file and remappings.

        Args:
            compiler_input: solc standard-json input
            output_sources: `output.sources` of the same compilation (optional)
        """
        sources = compiler_input.get('sources', {})
        remappings = _parse_remappings(compiler_input.get('settings', {}).get('remappings', []))
        edges: Dict[str, Set[str]] = {}

        for source_name, source in sources.items():
            imports = None
            if output_sources and source_name in output_sources:
                imports = cls._imports_from_ast(output_sources[source_name].get('ast'))
            if imports is None:
                content = source.get('content', '') if isinstance(source, dict) else ''
                imports = [
                    cls._resolve_import(source_name, raw, remappings)
                    for raw in cls._imports_from_source(content)
                ]

            edges[source_name] = set()
            for dependency in imports:
                if dependency in sources:
                    edges[source_name].add(dependency)
                else:
                    logger.warning(f"Import {dependency} of {source_name} is not part of the compiler input, skipping")

        return cls(edges)


    @staticmethod
    def _imports_from_ast(ast: Optional[Dict[str, Any]]) -> Optional[List[str]]:
        if not isinstance(ast, dict) or 'nodes' not in ast:
            return None
        return [
            node['absolutePath']
            for node in ast['nodes']
            if node.get('nodeType') == 'ImportDirective' and node.get('absolutePath')
        ]


    @staticmethod
    def _imports_from_source(content: str) -> List[str]:
        stripped = COMMENT_PATTERN.sub(lambda match: match.group(1) or '', content)
        return IMPORT_PATTERN.findall(stripped)


    @staticmethod
    def _resolve_import(importer: str, raw_import: str, remappings: List[Tuple[str, str, str]]) -> str:
        if raw_import.startswith(("./", "../")):
            return posixpath.normpath(posixpath.join(posixpath.dirname(importer), raw_import))

        for context, prefix, target in remappings:
            if context and not importer.startswith(context):
                continue
            if raw_import.startswith(prefix):
                return target + raw_import[len(prefix):]

        return raw_import


    def get_transitive_dependencies(self, source_name: str) -> List[str]:
        """The source itself plus everything it imports, directly or not, sorted."""
        visited = set()
        pending = [source_name]
        while pending:
            current = pending.pop()
            if current in visited:
                continue
            visited.add(current)
            pending.extend(self._edges.get(current, ()))
        return sorted(visited)


def get_minimal_input(
    source_name: str,
    compiler_input: Dict[str, Any],
    output_sources: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Restrict a compiler input to one source file and its transitive imports.

    Submitting this instead of the whole project input keeps unrelated
    sources off the block explorer.

    Args:
        source_name: Source file declaring the contract being verified
        compiler_input: Full solc standard-json input used at deploy time
        output_sources: `output.sources` of the same compilation (optional)

    Returns:
        A new compiler input with the same language and settings

    Raises:
        UnexpectedNumberOfFilesError: If the source is not in the input
    """
    sources = compiler_input.get('sources', {})
    if source_name not in sources:
        raise UnexpectedNumberOfFilesError(source_name)

    graph = DependencyGraph.from_compiler_input(compiler_input, output_sources)
    included = graph.get_transitive_dependencies(source_name)
    logger.info(f"Minimal input for {source_name}: {len(included)}/{len(sources)} source files")

    minimal_input = copy.deepcopy({k: v for k, v in compiler_input.items() if k != 'sources'})
    minimal_input['sources'] = {name: copy.deepcopy(sources[name]) for name in included}
    return minimal_input
