import pytest
from sqlalchemy import func, select
from sqlalchemy.orm.exc import StaleDataError

from devconnector.core.errors import ConflictError, NotFoundError, ValidationError
from devconnector.crud import profile as profile_crud
from devconnector.db.models.profile import Profile
from devconnector.schemas.profile import EducationCreate, ExperienceCreate, ProfileUpsertRequest
from devconnector.services.profiles import ProfileService, build_profile_changes, parse_skills


async def _profile_count(db, user_id):
    result = await db.execute(select(func.count()).select_from(Profile).where(Profile.user_id == user_id))
    return result.scalar_one()


@pytest.fixture
async def user(make_user):
    return await make_user()


@pytest.fixture
def service(db):
    return ProfileService(db)


@pytest.fixture
async def profile(service, user):
    return await service.upsert_profile(user.id, ProfileUpsertRequest(status="Developer", skills="go, rust"))


def test_parse_skills_trims_and_drops_empty_items():
    assert parse_skills(" python ,django,, ,  sql ") == ["python", "django", "sql"]
    assert parse_skills(None) == []


def test_build_profile_changes_omits_blank_fields():
    changes = build_profile_changes(
        ProfileUpsertRequest(status="Developer", skills="go", company="", bio="  ", twitter="https://twitter.com/jd")
    )
    assert changes == {
        "status": "Developer",
        "skills": ["go"],
        "social": {"twitter": "https://twitter.com/jd"},
    }


def test_build_profile_changes_reports_all_missing_fields():
    with pytest.raises(ValidationError) as exc_info:
        build_profile_changes(ProfileUpsertRequest(skills=" , "))
    fields = [error["field"] for error in exc_info.value.errors]
    assert fields == ["status", "skills"]


async def test_upsert_creates_profile_with_parsed_skills(profile, user):
    assert profile.user_id == user.id
    assert profile.status == "Developer"
    assert profile.skills == ["go", "rust"]
    assert profile.experience == []
    assert profile.education == []
    assert profile.user.name == "Jane Doe"


async def test_second_upsert_updates_the_same_profile(service, profile, user, db):
    updated = await service.upsert_profile(
        user.id, ProfileUpsertRequest(status="Senior Developer", skills="go", company="Acme")
    )

    assert updated.id == profile.id
    assert updated.status == "Senior Developer"
    assert updated.company == "Acme"
    assert updated.skills == ["go"]
    assert await _profile_count(db, user.id) == 1


async def test_upsert_keeps_fields_not_supplied(service, user):
    await service.upsert_profile(
        user.id,
        ProfileUpsertRequest(status="Developer", skills="go", bio="Hello", youtube="https://youtube.com/jd"),
    )
    updated = await service.upsert_profile(
        user.id, ProfileUpsertRequest(status="Developer", skills="go", twitter="https://twitter.com/jd")
    )

    assert updated.bio == "Hello"
    assert updated.social == {"youtube": "https://youtube.com/jd", "twitter": "https://twitter.com/jd"}


async def test_upsert_leaves_nested_sequences_untouched(service, profile, user):
    await service.add_experience(user.id, ExperienceCreate(title="Eng", company="Acme", from_date="2020-01-01"))

    updated = await service.upsert_profile(user.id, ProfileUpsertRequest(status="Lead", skills="go"))

    assert [entry["title"] for entry in updated.experience] == ["Eng"]


async def test_upsert_without_required_fields_writes_nothing(service, user, db):
    with pytest.raises(ValidationError):
        await service.upsert_profile(user.id, ProfileUpsertRequest(company="Acme"))
    assert await _profile_count(db, user.id) == 0


async def test_upsert_falls_back_to_update_when_create_races(service, profile, user, db, monkeypatch):
    user_id = user.id
    profile_id = profile.id
    await db.commit()

    real_lookup = profile_crud.get_by_user_id
    calls = []

    async def lookup_missing_once(session, owner_id):
        calls.append(owner_id)
        if len(calls) == 1:
            return None
        return await real_lookup(session, owner_id)

    monkeypatch.setattr(profile_crud, "get_by_user_id", lookup_missing_once)

    updated = await service.upsert_profile(user_id, ProfileUpsertRequest(status="Architect", skills="go"))

    assert updated.id == profile_id
    assert updated.status == "Architect"
    assert await _profile_count(db, user_id) == 1


async def test_experience_is_inserted_at_head(service, profile, user):
    first = await service.add_experience(
        user.id, ExperienceCreate(title="Eng", company="Acme", from_date="2020-01-01")
    )
    assert first.experience[0]["title"] == "Eng"

    second = await service.add_experience(
        user.id, ExperienceCreate(title="Lead", company="Acme", from_date="2022-01-01")
    )
    assert [entry["title"] for entry in second.experience] == ["Lead", "Eng"]
    assert second.experience[0]["from"] == "2022-01-01"
    assert second.experience[0]["id"] != second.experience[1]["id"]


async def test_add_experience_reports_every_missing_field(service, profile, user):
    with pytest.raises(ValidationError) as exc_info:
        await service.add_experience(user.id, ExperienceCreate(location="Berlin"))

    assert [error["field"] for error in exc_info.value.errors] == ["title", "company", "from"]


async def test_add_experience_reports_bad_date_with_missing_fields(service, profile, user):
    with pytest.raises(ValidationError) as exc_info:
        await service.add_experience(user.id, ExperienceCreate(from_date="not-a-date"))

    assert exc_info.value.errors == [
        {"field": "title", "message": "Title is required"},
        {"field": "company", "message": "Company is required"},
        {"field": "from", "message": "From date is not a valid date"},
    ]


async def test_add_education_rejects_bad_to_date(service, profile, user):
    with pytest.raises(ValidationError) as exc_info:
        await service.add_education(
            user.id,
            EducationCreate(school="MIT", degree="BSc", fieldofstudy="CS", from_date="2010-09-01", to_date="June"),
        )

    assert [error["field"] for error in exc_info.value.errors] == ["to"]


async def test_blank_to_date_is_stored_as_null(service, profile, user):
    updated = await service.add_experience(
        user.id, ExperienceCreate(title="Eng", company="Acme", from_date=" 2020-01-01 ", to_date="")
    )

    assert updated.experience[0]["from"] == "2020-01-01"
    assert updated.experience[0]["to"] is None


async def test_add_experience_requires_existing_profile(service, user):
    with pytest.raises(NotFoundError):
        await service.add_experience(user.id, ExperienceCreate(title="Eng", company="Acme", from_date="2020-01-01"))


async def test_remove_experience_keeps_order_of_the_rest(service, profile, user):
    for title in ("A", "B", "C"):
        updated = await service.add_experience(
            user.id, ExperienceCreate(title=title, company="Acme", from_date="2020-01-01")
        )
    middle_id = updated.experience[1]["id"]

    updated = await service.remove_experience(user.id, middle_id)

    assert [entry["title"] for entry in updated.experience] == ["C", "A"]


async def test_remove_unknown_experience_is_a_noop(service, profile, user):
    updated = await service.add_experience(
        user.id, ExperienceCreate(title="Eng", company="Acme", from_date="2020-01-01")
    )
    before = list(updated.experience)

    after = await service.remove_experience(user.id, "does-not-exist")

    assert after.experience == before


async def test_education_add_and_remove(service, profile, user):
    updated = await service.add_education(
        user.id,
        EducationCreate(school="MIT", degree="BSc", fieldofstudy="CS", from_date="2010-09-01", to_date="2014-06-01"),
    )
    entry = updated.education[0]
    assert entry["school"] == "MIT"
    assert entry["to"] == "2014-06-01"
    assert entry["current"] is False

    updated = await service.remove_education(user.id, entry["id"])
    assert updated.education == []


async def test_add_education_reports_every_missing_field(service, profile, user):
    with pytest.raises(ValidationError) as exc_info:
        await service.add_education(user.id, EducationCreate(school="MIT", degree=" "))

    assert [error["field"] for error in exc_info.value.errors] == ["degree", "fieldofstudy", "from"]


async def test_get_own_profile_missing(service, user):
    with pytest.raises(NotFoundError):
        await service.get_own_profile(user.id)


async def test_get_profile_by_user_id(service, profile, user):
    found = await service.get_profile_by_user_id(str(user.id))
    assert found.id == profile.id

    with pytest.raises(NotFoundError):
        await service.get_profile_by_user_id("not-a-uuid")


async def test_list_profiles(service, profile, make_user):
    other = await make_user(name="John Roe", email="john@example.com")
    await service.upsert_profile(other.id, ProfileUpsertRequest(status="Student", skills="c"))

    profiles = await service.list_profiles()

    assert {p.user.name for p in profiles} == {"Jane Doe", "John Roe"}


async def test_concurrent_modification_is_reported_as_conflict(service, profile, user, monkeypatch):
    async def stale_update(session, db_obj, changes):
        raise StaleDataError("version mismatch")

    monkeypatch.setattr(profile_crud, "update_fields", stale_update)

    with pytest.raises(ConflictError):
        await service.add_experience(user.id, ExperienceCreate(title="Eng", company="Acme", from_date="2020-01-01"))
