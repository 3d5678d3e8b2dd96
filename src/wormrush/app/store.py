from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from ..sim.core.entities import Tier

logger = logging.getLogger(__name__)


def _empty_scores() -> Dict[str, int]:
    return {tier.value: 0 for tier in Tier}


class InMemoryHighScoreStore:
    def __init__(self, scores: Optional[Dict[str, int]] = None):
        self.scores = _empty_scores()
        if scores:
            self.scores.update({Tier.parse(k).value: int(v) for k, v in scores.items()})
        self.saves = 0

    def load_high_scores(self) -> Dict[str, int]:
        return dict(self.scores)

    def save_high_scores(self, scores: Dict[str, int]) -> None:
        self.scores = dict(scores)
        self.saves += 1


class JsonHighScoreStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load_high_scores(self) -> Dict[str, int]:
        scores = _empty_scores()
        if not self.path.exists():
            return scores
        raw = json.loads(self.path.read_text())
        for key, value in raw.items():
            # Older files used "level1"/"level2".
            key = key.replace("level", "tier") if key.startswith("level") else key
            scores[Tier.parse(key).value] = int(value)
        return scores

    def save_high_scores(self, scores: Dict[str, int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(scores, indent=2, sort_keys=True))
        logger.info("Saved high scores to %s", self.path)

