"""Unit tests for the skill-match predicate."""

import pytest

from jobsphere.matching import has_overlap, skill_matches, skills_match, split_skills


@pytest.mark.unit
def test_substring_matches_longer_skill():
    """"Java" is contained in "javascript"."""
    assert skills_match(["Java"], ["javascript"])


@pytest.mark.unit
def test_unrelated_skills_do_not_match():
    assert not skills_match(["React"], ["Vue"])


@pytest.mark.unit
def test_containment_works_in_both_directions():
    assert skills_match(["JavaScript"], ["java"])
    assert skills_match(["java"], ["JavaScript"])
    assert skill_matches("react.js", "React")
    assert skill_matches("React", "react.js")


@pytest.mark.unit
def test_matching_is_case_insensitive():
    assert skills_match(["PYTHON"], ["python"])
    assert skills_match(["sql"], ["PostgreSQL"])


@pytest.mark.unit
def test_empty_required_skills_match_everyone():
    assert skills_match([], ["Anything"])
    assert skills_match([], [])
    assert skills_match(None, None)


@pytest.mark.unit
def test_required_skills_with_no_candidate_skills_do_not_match():
    assert not skills_match(["Go"], [])
    assert not skills_match(["Go"], None)


@pytest.mark.unit
def test_has_overlap_is_false_without_required_skills():
    """Recommendations need an actual shared skill."""
    assert not has_overlap([], ["Python"])
    assert has_overlap(["Python", "Rust"], ["python3"])


@pytest.mark.unit
def test_blank_skills_never_match():
    assert not skill_matches("", "Python")
    assert not skill_matches("   ", "Python")
    assert not skills_match(["Rust"], ["", "  "])


@pytest.mark.unit
def test_split_skills_preserves_required_order():
    matching, missing = split_skills(
        ["TypeScript", "React", "Docker", "CSS"],
        ["react", "Tailwind CSS"],
    )
    assert matching == ["React", "CSS"]
    assert missing == ["TypeScript", "Docker"]


@pytest.mark.unit
def test_split_skills_with_no_candidate_skills():
    matching, missing = split_skills(["A", "B"], None)
    assert matching == []
    assert missing == ["A", "B"]
