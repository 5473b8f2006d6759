"""
Unit tests for agent scoring and ranking (no server required).
Run: pytest tests/test_agent_matcher.py -v
"""

from sqlalchemy.exc import OperationalError

from quickdesk.models.user import ROLE_AGENT, User
from quickdesk.services import agent_matcher
from quickdesk.services.agent_matcher import (
    AgentSnapshot,
    best_agent,
    normalize_tags,
    rank_agents,
    rank_candidates,
    score_agent,
    snapshot_agent,
)


def _agent(agent_id, tags=(), rating=0.0):
    return AgentSnapshot(
        id=agent_id,
        username=f"agent{agent_id}",
        email=f"agent{agent_id}@example.com",
        specializations=tuple(tags),
        rating=rating,
    )


class TestScoreAgent:
    def test_description_match_scores_two(self):
        assert score_agent("I have a printer issue", (), _agent(1, ["printer"])) == 2.0

    def test_description_match_counts_presence_not_occurrences(self):
        assert score_agent("printer printer printer", (), _agent(1, ["printer"])) == 2.0

    def test_repeated_agent_tags_each_count(self):
        assert score_agent("printer jam", (), _agent(1, ["printer", "printer"])) == 4.0

    def test_matching_is_case_insensitive(self):
        assert score_agent("My PRINTER is jammed", (), _agent(1, ["Printer"])) == 2.0

    def test_category_tag_contains_agent_tag(self):
        assert score_agent("screen flickers", ("network",), _agent(1, ["net"])) == 1.0

    def test_agent_tag_contains_category_tag(self):
        assert score_agent("screen flickers", ("net",), _agent(1, ["network"])) == 1.0

    def test_category_bonus_is_case_insensitive(self):
        assert score_agent("screen flickers", ("WiFi",), _agent(1, ["wifi"])) == 1.0

    def test_category_tag_fires_once_per_matching_agent_tag(self):
        assert score_agent("screen flickers", ("network",), _agent(1, ["net", "network"])) == 2.0

    def test_rating_bonus(self):
        assert score_agent("anything", (), _agent(1, [], rating=4)) == 2.0

    def test_combined_score(self):
        category = ("printer", "computer", "laptop", "hardware", "repair")
        agent = _agent(1, ["printer", "hardware"], rating=3)
        # 2 (printer in text) + 1 (printer~printer) + 1 (hardware~hardware) + 1.5 (rating)
        assert score_agent("printer broken", category, agent) == 5.5

    def test_no_tags_no_rating_scores_zero(self):
        assert score_agent("printer broken", ("printer",), _agent(1)) == 0.0


class TestRankCandidates:
    def test_unskilled_unrated_agents_excluded(self):
        agents = [_agent(1), _agent(2), _agent(3)]
        assert rank_candidates("printer broken", ("printer",), agents) == []

    def test_rating_only_agent_included(self):
        ranked = rank_candidates("nothing in common", (), [_agent(1, ["wifi"], rating=4)])
        assert len(ranked) == 1
        assert ranked[0].score == 2.0
        assert ranked[0].rating == 4

    def test_sorted_by_descending_score(self):
        agents = [
            _agent(1, ["wifi"]),
            _agent(2, ["printer", "paper"]),
            _agent(3, ["printer"]),
        ]
        ranked = rank_candidates("printer out of paper", (), agents)
        assert [c.agent.id for c in ranked] == [2, 3]
        assert [c.score for c in ranked] == [4.0, 2.0]

    def test_ties_keep_enumeration_order(self):
        a, b = _agent(1, ["printer"]), _agent(2, ["printer"])
        assert [c.agent.id for c in rank_candidates("printer", (), [a, b])] == [1, 2]
        assert [c.agent.id for c in rank_candidates("printer", (), [b, a])] == [2, 1]

    def test_candidate_carries_specializations(self):
        ranked = rank_candidates("printer", (), [_agent(7, ["printer", "scanner"])])
        assert ranked[0].specializations == ("printer", "scanner")

    def test_missing_category_tags_treated_as_empty(self):
        ranked = rank_candidates("printer", None, [_agent(1, ["printer"])])
        assert ranked[0].score == 2.0

    def test_best_agent(self):
        ranked = rank_candidates("printer", (), [_agent(1, ["printer"], rating=1), _agent(2, ["printer"])])
        assert best_agent(ranked).id == 1
        assert best_agent([]) is None


class TestNormalizeTags:
    def test_strips_and_drops_blanks(self):
        assert normalize_tags(["  network ", "", "   ", "printer"]) == ["network", "printer"]

    def test_none_is_empty(self):
        assert normalize_tags(None) == []


class TestRankAgentsFromDatabase:
    def test_uses_category_and_agents_from_db(self, db_session, make_agent):
        printer = make_agent("pat", ["printer"])
        make_agent("nina", ["network"])
        # Category 1 is the seeded Hardware Support category
        ranked = rank_agents(db_session, "My printer is jammed", 1)
        assert [c.agent.id for c in ranked] == [printer.id]
        assert ranked[0].score == 3.0

    def test_unknown_category_scores_without_category_tags(self, db_session, make_agent):
        make_agent("pat", ["printer"])
        ranked = rank_agents(db_session, "My printer is jammed", 999)
        assert ranked[0].score == 2.0

    def test_non_agents_are_ignored(self, db_session, make_agent, register):
        register("alice", specializations=["printer"])
        assert rank_agents(db_session, "printer", None) == []

    def test_lookup_failure_returns_empty(self, db_session, make_agent, monkeypatch):
        make_agent("pat", ["printer"])

        def broken(db):
            raise OperationalError("SELECT", {}, Exception("database is unavailable"))

        monkeypatch.setattr(agent_matcher, "load_agent_snapshots", broken)
        assert rank_agents(db_session, "printer", 1) == []

    def test_non_string_tags_are_skipped(self, db_session, make_agent):
        printer = make_agent("pat", ["printer", 42, None])
        ranked = rank_agents(db_session, "My printer is jammed", 1)
        assert [c.agent.id for c in ranked] == [printer.id]
        assert ranked[0].specializations == ("printer",)
        assert ranked[0].score == 3.0

    def test_unreadable_agent_row_returns_empty(self, db_session, make_agent, monkeypatch):
        make_agent("pat", ["printer"])

        def unreadable(user):
            raise TypeError("rating is not a number")

        monkeypatch.setattr(agent_matcher, "snapshot_agent", unreadable)
        assert rank_agents(db_session, "printer", 1) == []


def test_snapshot_keeps_only_string_tags():
    user = User(
        id=7,
        username="pat",
        email="pat@example.com",
        role=ROLE_AGENT,
        specializations=["printer", 3, {"tag": "network"}, None, "wifi"],
        rating=2,
    )
    snapshot = snapshot_agent(user)
    assert snapshot.specializations == ("printer", "wifi")
    assert snapshot.rating == 2.0
