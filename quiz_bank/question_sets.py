import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import quote

from quiz_bank.config import MANIFEST_FILENAME
from quiz_bank.models import QuestionSet
from quiz_bank.regexes import JSON_SUFFIX_RE, QUESTION_SET_FILE_RE

logger = logging.getLogger(__name__)


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return 0


def question_set_for(filename: str) -> QuestionSet:
    return QuestionSet(
        filename=filename,
        url="/" + quote(filename),
        title=JSON_SUFFIX_RE.sub("", filename),
    )


def list_question_sets(directory, newest_first: bool = True) -> List[QuestionSet]:
    """
    Question set files (names ending in "Questions.json") in directory,
    ordered by modification time. A missing directory gives an empty list.
    """
    public = Path(directory)
    if not public.is_dir():
        logger.info("Question set directory %s not found", public)
        return []

    found = [
        (name, _mtime(public / name))
        for name in sorted(p.name for p in public.iterdir())
        if QUESTION_SET_FILE_RE.search(name)
    ]
    found.sort(key=lambda item: item[1], reverse=newest_first)

    return [question_set_for(name) for name, _ in found]


def manifest_data(sets: List[QuestionSet]) -> List[dict]:
    return [asdict(s) for s in sets]


def write_manifest(directory, output: Optional[str] = None) -> Tuple[Path, List[QuestionSet]]:
    """
    Write the static manifest used by hosts without a running server.
    Oldest sets come first so newly added ones end up at the bottom.
    """
    public = Path(directory)
    sets = list_question_sets(public, newest_first=False)
    out_path = Path(output) if output else public / MANIFEST_FILENAME

    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(manifest_data(sets), f, indent=2)

    logger.info("Wrote %d question sets to %s", len(sets), out_path)
    return out_path, sets
