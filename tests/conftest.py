import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("LOG_LEVEL", "WARNING")
# Pin league baselines so a local .env cannot shift expected values.
os.environ["LEAGUE_AVG_YELLOW"] = "4.0"
os.environ["LEAGUE_AVG_RED"] = "0.15"
os.environ["VALUE_EV_THRESHOLD"] = "0.05"
os.environ["MIN_EV_PERCENT"] = "5"


@pytest.fixture()
def referee():
    from refstats.domain import RefereeAggregate

    return RefereeAggregate(
        avg_yellow_cards=4.0,
        avg_red_cards=0.15,
        matches_officiated=25,
        strictness_index=4.5,
    )


@pytest.fixture()
def team_factory():
    from refstats.domain import TeamAggregate

    def _make(yellow: float = 2.0, red: float = 0.1, fouls: float = 12.0, played: int = 15) -> TeamAggregate:
        return TeamAggregate(
            avg_yellow_received=yellow,
            avg_red_received=red,
            avg_fouls_committed=fouls,
            matches_played=played,
        )

    return _make
