"""Tests for profile calculations and the profile manager."""

import asyncio

import pytest

from calories_daily.domain.errors import (
    AuthRequiredError,
    RemoteUnavailableError,
    ValidationError,
)
from calories_daily.domain.profile import (
    Gender,
    Goal,
    GoalType,
    Profile,
    ProfileDocument,
)
from calories_daily.services.profile import (
    ProfileManager,
    compute_bmr,
    compute_derived,
    compute_target_kcal,
)
from tests.conftest import ALICE, BOB


def test_bmr_uses_mifflin_st_jeor() -> None:
    assert compute_bmr(Gender.MALE, 30, 180, 80) == 1780
    assert compute_bmr(Gender.FEMALE, 30, 165, 60) == pytest.approx(1320.25)


def test_bmr_is_none_when_input_missing() -> None:
    assert compute_bmr(Gender.MALE, None, 180, 80) is None


@pytest.mark.parametrize(
    ("tdee", "goal_type", "delta", "expected"),
    [
        (2000, GoalType.MAINTAIN, 500, 2000),
        (2000, GoalType.CUT, 500, 1500),
        (2000, GoalType.CUT, 900, 1200),
        (1500, GoalType.CUT, 1000, 1200),
        (2000, GoalType.BULK, 250, 2250),
        (None, GoalType.BULK, 250, None),
    ],
)
def test_target_by_goal(tdee, goal_type, delta, expected) -> None:
    assert compute_target_kcal(tdee, goal_type, delta) == expected


def test_compute_derived_is_pure() -> None:
    profile = Profile(
        gender=Gender.MALE,
        age=30,
        height_cm=180,
        weight_kg=80,
        activity_factor=1.5,
        goal=Goal(type=GoalType.CUT, delta=500),
    )

    first = compute_derived(profile)
    second = compute_derived(profile)

    assert first == second
    assert first.bmr == 1780
    assert first.tdee == 2670
    assert first.target_kcal == 2170
    assert profile.bmr is None


def test_compute_derived_with_missing_inputs() -> None:
    derived = compute_derived(Profile())
    assert (derived.bmr, derived.tdee, derived.target_kcal) == (None, None, None)


def test_calculate_stores_rounded_values(profile_manager, local_cache) -> None:
    profile = asyncio.run(
        profile_manager.calculate("female", 30, 165, 60, activity_factor=1.375)
    )

    assert profile.bmr == 1320
    assert profile.tdee == 1815
    assert profile.goal.target_kcal == 1815
    assert local_cache.load_profile() == profile


@pytest.mark.parametrize(
    ("gender", "age", "height", "weight", "activity"),
    [
        ("robot", 30, 180, 80, 1.2),
        ("male", None, 180, 80, 1.2),
        ("male", 30, 0, 80, 1.2),
        ("male", 30, 180, -5, 1.2),
        ("male", 30, 180, 80, 0),
    ],
)
def test_calculate_rejects_bad_input(
    profile_manager, gender, age, height, weight, activity
) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(profile_manager.calculate(gender, age, height, weight, activity))

    assert profile_manager.profile == Profile()


def test_apply_goal_rederives_target(profile_manager) -> None:
    asyncio.run(profile_manager.calculate("male", 30, 180, 80, 1.5))

    profile = asyncio.run(profile_manager.apply_goal("cut", 500))

    assert profile.goal == Goal(type=GoalType.CUT, delta=500, target_kcal=2170)


def test_apply_goal_rejects_unknown_type(profile_manager) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(profile_manager.apply_goal("shred", 500))
    with pytest.raises(ValidationError):
        asyncio.run(profile_manager.apply_goal("cut", -10))


def test_preview_goal_does_not_change_state(profile_manager) -> None:
    asyncio.run(profile_manager.calculate("male", 30, 180, 80, 1.5))

    assert profile_manager.preview_goal("bulk", 300) == 2970
    assert profile_manager.profile.goal.type == GoalType.MAINTAIN


def test_save_requires_session_but_keeps_local_copy(
    profile_manager, local_cache
) -> None:
    asyncio.run(profile_manager.calculate("male", 30, 180, 80, 1.5))
    local_cache.save_profile(Profile())

    with pytest.raises(AuthRequiredError):
        asyncio.run(profile_manager.save(None))

    assert local_cache.load_profile().tdee == 2670


def test_save_merges_remote_document(profile_manager, profile_repository) -> None:
    asyncio.run(profile_manager.calculate("male", 30, 180, 80, 1.5))
    profile = asyncio.run(profile_manager.save(ALICE))

    assert profile_repository.merged == [(ALICE.user_id, profile)]


def test_hydrate_prefers_remote_profile(
    profile_manager, profile_repository, local_cache
) -> None:
    asyncio.run(profile_manager.calculate("male", 30, 180, 80, 1.5))
    remote = Profile(
        gender=Gender.FEMALE,
        age=25,
        height_cm=170,
        weight_kg=65,
        tdee=2000,
        goal=Goal(type=GoalType.CUT, delta=300),
    )
    profile_repository.documents[ALICE.user_id] = ProfileDocument(
        email=ALICE.email, profile=remote
    )

    profile = asyncio.run(profile_manager.hydrate(ALICE))

    assert profile.age == 25
    assert profile.goal.target_kcal == 1700
    assert local_cache.load_profile() == profile


def test_hydrate_creates_missing_document_from_local_profile(
    profile_manager, profile_repository
) -> None:
    asyncio.run(profile_manager.calculate("male", 30, 180, 80, 1.5))

    asyncio.run(profile_manager.hydrate(ALICE))

    assert profile_repository.created == [ALICE.user_id]
    assert profile_repository.documents[ALICE.user_id].profile.tdee == 2670


def test_ensure_remote_document_never_overwrites(
    profile_manager, profile_repository
) -> None:
    existing = ProfileDocument(email=ALICE.email, profile=Profile(age=50))
    profile_repository.documents[ALICE.user_id] = existing

    asyncio.run(profile_manager.ensure_remote_document(ALICE))

    assert profile_repository.documents[ALICE.user_id] is existing
    assert profile_repository.created == []


def test_remote_failure_surfaces_as_unavailable(
    profile_manager, profile_repository
) -> None:
    profile_repository.fail = True

    with pytest.raises(RemoteUnavailableError):
        asyncio.run(profile_manager.hydrate(ALICE))


def test_profile_loads_lazily_from_cache(profile_repository, local_cache) -> None:
    local_cache.save_profile(Profile(age=41, tdee=2000))
    manager = ProfileManager(repository=profile_repository, local_cache=local_cache)

    assert manager.profile.age == 41
    assert manager.profile.goal.target_kcal == 2000


def test_hydrate_keeps_local_profile_when_remote_profile_is_empty(
    profile_manager, profile_repository, local_cache
) -> None:
    asyncio.run(profile_manager.calculate("male", 30, 180, 80, 1.2))
    profile_repository.documents[ALICE.user_id] = ProfileDocument(
        email=ALICE.email, profile=None
    )

    profile = asyncio.run(profile_manager.hydrate(ALICE))

    assert profile.age == 30
    assert profile.tdee == 2136
    assert local_cache.load_profile() == profile
    assert profile_repository.created == []
    assert profile_manager.session == ALICE


def test_latest_profile_hydrate_wins(profile_manager, profile_repository) -> None:
    profile_repository.documents[ALICE.user_id] = ProfileDocument(
        email=ALICE.email, profile=Profile(age=30, tdee=2000)
    )
    profile_repository.documents[BOB.user_id] = ProfileDocument(
        email=BOB.email, profile=Profile(age=45, tdee=2500)
    )

    async def run() -> None:
        await asyncio.gather(
            profile_manager.hydrate(ALICE), profile_manager.hydrate(BOB)
        )

    asyncio.run(run())

    assert profile_manager.profile.age == 45
    assert profile_manager.session == BOB


def test_anonymous_hydrate_supersedes_remote_ones(
    profile_manager, profile_repository, local_cache
) -> None:
    local_cache.save_profile(Profile(age=52, tdee=1900))
    profile_repository.documents[ALICE.user_id] = ProfileDocument(
        email=ALICE.email, profile=Profile(age=30, tdee=2000)
    )

    async def run() -> None:
        await asyncio.gather(
            profile_manager.hydrate(ALICE),
            profile_manager.hydrate(BOB),
            profile_manager.hydrate(None),
        )

    asyncio.run(run())

    assert profile_manager.profile.age == 52
    assert profile_manager.session is None
    assert profile_repository.created == []
    assert local_cache.load_profile().age == 52
