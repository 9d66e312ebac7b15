# internal/scanner/teams.py

from __future__ import annotations

import logging
from typing import List, Sequence

from internal.client.concourse import ConcourseClient, Team
from internal.errors import ConfigConflict
from internal.models.volume import Volume

logger = logging.getLogger(__name__)


def resolve_teams(
    client: ConcourseClient,
    team_names: Sequence[str],
    all_teams: bool,
    default_team: str,
) -> List[Team]:
    if team_names and all_teams:
        raise ConfigConflict("cannot specify both --all-teams and --team")

    if all_teams:
        return [client.team(t.name) for t in client.list_teams()]

    if team_names:
        # Existence is checked by the volumes endpoint, not here.
        return [client.team(n) for n in team_names]

    return [client.team(default_team)]


def collect_volumes(teams: Sequence[Team]) -> List[Volume]:
    """Fetch each team in order and concatenate. First failure aborts."""
    volumes: List[Volume] = []
    for team in teams:
        volumes.extend(team.list_volumes())
    logger.debug("collected %d volume(s) across %d team(s)", len(volumes), len(teams))
    return volumes
