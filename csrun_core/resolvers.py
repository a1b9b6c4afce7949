"""
Path resolution for ``//#include`` and ``//#import`` directive targets.

Both resolvers are relative to the directory of the file holding the
directive.
"""
import os


class IncludeResolver:
    """Resolves include targets: always the referencing directory joined with the target."""

    def __init__(self, base_file):
        if os.path.isdir(base_file):
            self.base_dir = base_file
        else:
            self.base_dir = os.path.dirname(base_file)

    def resolve(self, target):
        # No existence check: a missing include surfaces when it is scanned.
        return os.path.join(self.base_dir, target)


class ImportResolver(IncludeResolver):
    """
    Resolves import targets.

    A target naming a file beside the referencing script resolves to that
    file; anything else is returned untouched as a library name for the
    compiler service to find.
    """

    def resolve(self, target):
        path = super().resolve(target)
        if os.path.isfile(path):
            return path
        return target
