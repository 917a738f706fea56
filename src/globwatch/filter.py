"""Glob matching for raw notification paths."""

from wcmatch import glob

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB | glob.NEGATE | glob.NEGATEALL


class PathFilter:
    """Stateless matcher deciding which notifications reach classification.

    The pattern is matched against the whole root-relative path: ``*``
    stays within one path segment, ``**`` spans directories, braces and
    extended globs expand, and a leading ``!`` negates the pattern.

    Attributes:
        pattern: Glob pattern the filter was built from.
    """

    def __init__(self, pattern: str) -> None:
        """Store the glob pattern.

        Args:
            pattern: Glob pattern matched against root-relative paths.
        """
        self._pattern = pattern

    @property
    def pattern(self) -> str:
        """Glob pattern the filter was built from."""
        return self._pattern

    def matches(self, path: str | None) -> bool:
        """Check whether a notification path matches the pattern.

        Args:
            path: Root-relative path, or None when the backend omitted it.

        Returns:
            True if the path is present and matches.
        """
        if not path:
            return False
        return glob.globmatch(path, self._pattern, flags=GLOB_FLAGS)
