"""
Dependency resolution over ``//#include`` directives.

Builds the set of source units reachable from an entry file. Similar to a C
preprocessor's include handling, but files are kept as separate compile units
instead of being pasted together, and each file is scanned at most once, which
also makes include cycles harmless.
"""
import os

from .logger import debug_log
from .scanner import DirectiveScanner


def canonical_path(path):
    """Absolute, normalised form of ``path`` used as the identity of a source unit."""
    return os.path.abspath(path)


class ResolutionSet:
    """
    Canonical path -> SourceUnit, in discovery order (entry file first).

    Entries are never replaced or removed: the first resolution of a path wins.
    """

    def __init__(self):
        self._units = {}

    def __contains__(self, path):
        return path in self._units

    def __getitem__(self, path):
        return self._units[path]

    def __iter__(self):
        return iter(self._units.values())

    def __len__(self):
        return len(self._units)

    def paths(self):
        return list(self._units.keys())

    def add(self, path, unit):
        if path in self._units:
            raise KeyError(f"Source unit already resolved: {path}")
        self._units[path] = unit

    def release_all(self):
        """Release every unit's temporary file."""
        for unit in self._units.values():
            unit.release()


class DependencyResolver:
    """
    Scans the entry file, then repeatedly scans newly discovered includes
    until a pass finds nothing new.

    Imports are collected by the scanner as opaque library references and are
    never opened here.
    """

    def __init__(self, scanner=None, units=None):
        self.scanner = scanner or DirectiveScanner()
        self.units = units if units is not None else ResolutionSet()

    def resolve(self, entry_file):
        """
        Resolve everything reachable from ``entry_file`` into ``self.units``.

        Returns:
            The ResolutionSet, closed under includes.

        Raises:
            FileNotFoundError: If the entry file or any include is missing.
            ScanError: If any file's directive section is malformed.
        """
        entry_path = canonical_path(entry_file)
        if entry_path not in self.units:
            self.units.add(entry_path, self.scanner.scan(entry_path))

        frontier = [self.units[entry_path]]
        passes = 0
        while frontier:
            passes += 1
            discovered = self._scan_includes(frontier)
            for path, unit in discovered.items():
                self.units.add(path, unit)
            frontier = list(discovered.values())

        debug_log(f"Resolved {len(self.units)} source unit(s) in {passes} pass(es)")
        return self.units

    def _scan_includes(self, frontier):
        """Scan every include of ``frontier`` not seen before. One pass, deduplicated."""
        discovered = {}
        try:
            for unit in frontier:
                for target in unit.includes:
                    path = canonical_path(target)
                    if path in self.units or path in discovered:
                        continue
                    debug_log(f"{unit.source_path} includes {path}")
                    discovered[path] = self.scanner.scan(path)
        except Exception:
            # Units from this pass are not in the set yet, so nobody else can release them.
            for unit in discovered.values():
                unit.release()
            raise
        return discovered
