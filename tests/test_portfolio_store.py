"""
PortfolioStore: атомарные переходы, подписки по ключу, снимок, загрузка с сервера.
"""
import json

import pytest
from pydantic import ValidationError

from app.schemas.content import (
    ContactConfig,
    ContentDomain,
    PersonalInfo,
    Project,
    ProjectsContent,
    SkillsContent,
)
from app.services.portfolio_store import SNAPSHOT_KEY, PortfolioStore

pytestmark = pytest.mark.anyio


@pytest.fixture
def store(fake_client, session_storage) -> PortfolioStore:
    return PortfolioStore.create(fake_client, session_storage)


class TestState:
    def test_starts_with_defaults(self, store):
        assert store.personal_info.name == "Your Name"
        assert store.skills == ()
        assert store.contact_config == ContactConfig(service="none", endpoint="")
        assert store.is_loaded is False

    def test_setter_replaces_value(self, store):
        store.set_skills(["Python", "Go"])
        assert list(store.skills) == ["Python", "Go"]
        assert store.select("skills") == ("Python", "Go")

    def test_unknown_key_rejected(self, store):
        with pytest.raises(KeyError):
            store.select("theme")
        with pytest.raises(KeyError):
            store.update_all_data(theme="dark")

    def test_state_is_immutable(self, store):
        with pytest.raises(ValidationError):
            store.state.skills = ("x",)

    def test_domain_values_cannot_be_changed_in_place(self, store):
        info = PersonalInfo(name="Ada", email="ada@example.com")
        store.set_personal_info(info)

        with pytest.raises(ValidationError):
            info.name = "Mutated"
        with pytest.raises(ValidationError):
            store.personal_info.name = "Mutated"
        assert store.personal_info.name == "Ada"

    def test_store_keeps_own_copy_of_nested_lists(self, store):
        calls = []
        store.subscribe("projects", lambda new, old: calls.append(new))
        project = Project(title="X", description="Y", tags=["a"])
        store.set_projects([project])

        project.tags.append("leaked")

        assert store.projects[0].tags == ["a"]
        assert len(calls) == 1


class TestSubscriptions:
    def test_bulk_update_is_one_transition(self, store):
        seen = []
        store.subscribe(None, lambda new, old: seen.append(new))

        store.update_all_data(
            personal_info=PersonalInfo(name="Ada", email="ada@example.com"),
            skills=["Python"],
            projects=[Project(title="X", description="Y", tags=["a"])],
        )

        assert len(seen) == 1
        state = seen[0]
        assert state.personal_info.name == "Ada"
        assert state.skills == ("Python",)
        assert state.projects[0].title == "X"

    def test_key_listener_fires_only_on_its_key(self, store):
        skills_changes = []
        store.subscribe("skills", lambda new, old: skills_changes.append((new, old)))

        store.set_projects([Project(title="X", description="Y", tags=["a"])])
        assert skills_changes == []

        store.set_skills(["Rust"])
        assert skills_changes == [(("Rust",), ())]

    def test_same_value_does_not_notify(self, store):
        calls = []
        store.subscribe(None, lambda new, old: calls.append(new))

        store.set_skills([])
        assert calls == []

    def test_unsubscribe(self, store):
        calls = []
        unsubscribe = store.subscribe("skills", lambda new, old: calls.append(new))
        unsubscribe()

        store.set_skills(["Go"])
        assert calls == []


class TestSnapshot:
    def test_persist_excludes_is_loaded(self, store, session_storage):
        store.update_all_data(skills=["Python"], is_loaded=True)
        store.persist()

        snapshot = json.loads(session_storage.get(SNAPSHOT_KEY))
        assert "isLoaded" not in snapshot
        assert snapshot["skills"] == ["Python"]
        assert snapshot["contactConfig"] == {"service": "none", "endpoint": ""}

    def test_hydrate_restores_snapshot_but_not_loaded_flag(self, store, fake_client, session_storage):
        store.update_all_data(skills=["Python"], is_loaded=True)
        store.close()

        restored = PortfolioStore.create(fake_client, session_storage)

        assert restored.skills == ("Python",)
        assert restored.is_loaded is False

    def test_invalid_snapshot_ignored(self, fake_client, session_storage):
        session_storage.set(SNAPSHOT_KEY, "{broken")

        store = PortfolioStore.create(fake_client, session_storage)
        assert store.skills == ()

    def test_store_without_storage(self, fake_client):
        store = PortfolioStore.create(fake_client)
        store.set_skills(["Go"])
        store.close()


class TestLoading:
    async def test_load_initial_data_reads_every_domain(self, store, fake_client):
        fake_client.content[ContentDomain.SKILLS] = SkillsContent(skills=["Python"])

        await store.load_initial_data()

        assert store.is_loaded is True
        assert store.skills == ("Python",)
        assert sorted(d.value for d in fake_client.reads) == sorted(d.value for d in ContentDomain)

    async def test_load_initial_data_is_noop_when_loaded(self, store, fake_client):
        await store.load_initial_data()
        fake_client.reads.clear()

        await store.load_initial_data()
        assert fake_client.reads == []

    async def test_reload_publishes_everything_at_once(self, store, fake_client):
        fake_client.content[ContentDomain.SKILLS] = SkillsContent(skills=["Python"])
        fake_client.content[ContentDomain.PROJECTS] = ProjectsContent(
            projects=[Project(title="X", description="Y", tags=["a"])]
        )
        loaded_states = []
        store.subscribe(None, lambda new, old: new.is_loaded and loaded_states.append(new))

        await store.reload_from_files()

        assert len(loaded_states) == 1
        assert loaded_states[0].skills == ("Python",)
        assert loaded_states[0].projects[0].title == "X"

    async def test_failed_read_falls_back_to_default(self, store, fake_client):
        store.set_skills(["stale"])
        fake_client.failing_reads.add(ContentDomain.SKILLS)
        fake_client.content[ContentDomain.PROJECTS] = ProjectsContent(
            projects=[Project(title="X", description="Y", tags=["a"])]
        )

        await store.reload_from_files()

        assert store.is_loaded is True
        assert store.skills == ()
        assert len(store.projects) == 1

    async def test_reload_clears_loaded_flag_first(self, store, fake_client):
        await store.load_initial_data()
        flags = []
        store.subscribe("is_loaded", lambda new, old: flags.append(new))

        await store.reload_from_files()
        assert flags == [False, True]
