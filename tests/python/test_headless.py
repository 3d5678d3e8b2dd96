import csv
import json

from wormrush.app.headless import run_headless
from wormrush.sim.core.config import GameConfig


def _read_csv(path):
    with path.open(newline="") as handle:
        return list(csv.reader(handle))


def _short_config() -> GameConfig:
    return GameConfig(round_duration=5)


def test_headless_log_header_and_rows(tmp_path):
    log_path = tmp_path / "frames.csv"

    outcomes = run_headless(rounds=1, seed=1, log_path=log_path, config=_short_config())

    rows = _read_csv(log_path)
    assert rows[0] == [
        "round",
        "tier",
        "frame",
        "time_ms",
        "elapsed_ms",
        "worms",
        "fading",
        "foods",
        "score",
        "time_remaining",
        "spawned",
        "killed",
        "eaten",
        "removed",
    ]
    assert len(rows) > 2
    idx = {name: i for i, name in enumerate(rows[0])}
    frames = [int(row[idx["frame"]]) for row in rows[1:]]
    assert frames[0] >= 1
    assert all(b > a for a, b in zip(frames, frames[1:]))
    assert {row[idx["tier"]] for row in rows[1:]} == {"tier1"}
    assert len(outcomes) == 1


def test_headless_summary_output(tmp_path):
    summary_path = tmp_path / "summary.json"

    outcomes = run_headless(rounds=3, seed=3, config=_short_config(), summary_path=summary_path)

    payload = json.loads(summary_path.read_text())
    assert payload["rounds"] == 3
    assert payload["seed"] == 3
    assert payload["wins"] + payload["losses"] == 3
    assert len(payload["outcomes"]) == 3
    assert [o["final_score"] for o in payload["outcomes"]] == [o.final_score for o in outcomes]
    assert payload["score"]["max"] == max(o.final_score for o in outcomes)
    assert payload["clicks"] > 0
    assert payload["hits"] >= 0


def test_headless_same_seed_same_rounds():
    first = run_headless(rounds=2, seed=11, config=_short_config())
    second = run_headless(rounds=2, seed=11, config=_short_config())

    assert [(o.won, o.final_score) for o in first] == [(o.won, o.final_score) for o in second]


def test_headless_persists_high_scores(tmp_path):
    scores_path = tmp_path / "scores.json"

    outcomes = run_headless(rounds=1, seed=5, config=_short_config(), scores_path=scores_path)

    best = max(0, outcomes[0].final_score)
    if outcomes[0].new_high_score:
        assert json.loads(scores_path.read_text())["tier1"] == best
    else:
        assert not scores_path.exists()


def test_headless_seed_does_not_touch_callers_config():
    config = _short_config()

    run_headless(rounds=1, seed=9, config=config)

    assert config.seed is None
