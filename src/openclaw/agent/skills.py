"""Load skill documents (``<folder>/SKILL.md``) and the base system prompt."""

import logging
import re
from pathlib import Path
from typing import (
    Dict,
    List,
    Optional,
    Sequence,
)

from openclaw.core.schema import Skill

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_SKILLS_DIR = PACKAGE_ROOT / "skills"
DEFAULT_SYSTEM_PROMPT = PACKAGE_ROOT / "prompts" / "system_prompt.txt"
SKILL_FILE = "SKILL.md"

_FRONTMATTER_RE = re.compile(r"^---\n(.*?)\n---\n(.*)$", re.DOTALL)
_FIELD_RE = {
    field: re.compile(rf"^{field}:\s*(.+)$", re.MULTILINE)
    for field in ("name", "description", "homepage")
}


class SkillLoadError(RuntimeError):
    """Raised when the skills directory itself cannot be read."""


def parse_frontmatter(text: str) -> Optional[Dict[str, str]]:
    """
    Parse the ``---`` delimited header of a skill document.

    Returns a dict with ``name``, ``description`` and optionally ``homepage``, or *None* when the
    header is missing, the body is empty, or a required field is absent.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match or not match.group(1) or not match.group(2):
        return None

    header = match.group(1)
    fields: Dict[str, str] = {}
    for field, pattern in _FIELD_RE.items():
        found = pattern.search(header)
        if found and found.group(1).strip():
            fields[field] = found.group(1).strip()

    if "name" not in fields or "description" not in fields:
        return None
    return fields


def load_skills(
    skills_dir: Optional[Path] = None, folders: Optional[Sequence[str]] = None
) -> List[Skill]:
    """
    Load every skill under *skills_dir*.

    Parameters
    ----------
    skills_dir:
        Directory holding one sub-directory per skill. Defaults to the packaged skills.
    folders:
        Folder names to load, in order. Defaults to every sub-directory, sorted.

    Returns
    -------
    The loaded skills. Folders whose SKILL.md cannot be read are logged and skipped.

    Raises
    ------
    SkillLoadError
        If *skills_dir* does not exist.
    """
    root = Path(skills_dir) if skills_dir else DEFAULT_SKILLS_DIR
    if not root.is_dir():
        raise SkillLoadError(f"Skills directory not found: {root}")

    if folders is None:
        folders = sorted(path.name for path in root.iterdir() if path.is_dir())

    skills: List[Skill] = []
    for folder in folders:
        path = root / folder / SKILL_FILE
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to load %s skill: %s", folder, exc)
            continue

        meta = parse_frontmatter(content)
        if meta:
            skills.append(
                Skill(
                    name=meta["name"],
                    folder=folder,
                    description=meta["description"],
                    homepage=meta.get("homepage"),
                    content=content,
                )
            )
            logger.info("Loaded skill: %s (%s)", meta["name"], folder)
        else:
            skills.append(
                Skill(name=folder, folder=folder, description=f"{folder} skill", content=content)
            )
            logger.info("Loaded skill without frontmatter: %s", folder)

    return skills


def load_base_prompt(path: Optional[Path] = None) -> str:
    """Read the base system prompt, falling back to the packaged default."""
    return Path(path or DEFAULT_SYSTEM_PROMPT).read_text(encoding="utf-8")
