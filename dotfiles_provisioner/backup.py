from __future__ import annotations

import filecmp
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .errors import BackupError

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = ".config-backup-"
STAMP_FORMAT = "%Y%m%d-%H%M%S"


class BackupStore:
    """Timestamped directory holding copies of user state about to be replaced.

    The directory is created on the first backup of a run and never removed.
    Paths under `root` keep their relative layout (.config/starship stays
    .config/starship); anything else is stored by name.
    """

    def __init__(
        self,
        root: Path,
        *,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], datetime] = datetime.now,
        dry_run: bool = False,
    ) -> None:
        self.root = Path(root)
        self.dir = self.root / f"{prefix}{clock().strftime(STAMP_FORMAT)}"
        self.dry_run = dry_run
        self.saved: List[Path] = []
        self._latest: Dict[Path, Path] = {}

    @property
    def created(self) -> bool:
        return self.dir.is_dir()

    def _dest_for(self, path: Path) -> Path:
        try:
            rel = path.relative_to(self.root)
        except ValueError:
            rel = Path(path.name)
        base = self.dir / rel
        dest = base
        n = 1
        # Same path saved again in one run after its content changed.
        while dest.exists() or dest.is_symlink():
            dest = base.with_name(f"{base.name}.~{n}")
            n += 1
        return dest

    def backup(self, path: Path) -> Optional[Path]:
        """Copy `path` into the backup dir; returns the copy's location.

        A file already copied this run with identical content is not copied
        again; the earlier copy is returned.
        """

        path = Path(path)
        if path.is_symlink() or not path.exists():
            return None

        prev = self._latest.get(path)
        if prev is not None and path.is_file() and filecmp.cmp(path, prev, shallow=False):
            logger.info("Already backed up %s -> %s", str(path), str(prev))
            return prev

        dest = self._dest_for(path)
        if self.dry_run:
            logger.info("Would back up %s -> %s", str(path), str(dest))
            return dest

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            if path.is_dir():
                shutil.copytree(path, dest, symlinks=True)
            else:
                shutil.copy2(path, dest)
        except OSError as e:
            raise BackupError(f"Could not back up {path} to {dest}: {e}") from e

        logger.info("Backed up %s -> %s", str(path), str(dest))
        self.saved.append(dest)
        self._latest[path] = dest
        return dest
