from supp_trivia.models import TEAMS, TEAM_LABELS


def assign_team(players, max_team_size=4):
    """Pick the team for the next player to join.

    Team A wins ties; returns None when both teams are full.
    """
    team_a = sum(1 for p in players if p.get('team') == 'A')
    team_b = sum(1 for p in players if p.get('team') == 'B')
    if team_a <= team_b and team_a < max_team_size:
        return 'A'
    if team_b < max_team_size:
        return 'B'
    return None


def other_team(team):
    return 'B' if team == 'A' else 'A'


def team_label(team):
    return TEAM_LABELS.get(team, team)


def is_team(value):
    return value in TEAMS
