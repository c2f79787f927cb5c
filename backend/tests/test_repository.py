import json

import pytest
from sqlalchemy.orm import sessionmaker

from parche_ai.core.config import settings
from parche_ai.db.database import build_engine
from parche_ai.db.models import Base, Plan
from parche_ai.db.repositories import PlanRepository
from parche_ai.services.catalog import get_catalog_snapshot, load_seed_catalog, seed_catalog
from parche_ai.services.models import PlanRecord


@pytest.fixture()
def db():
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def repo(db, seed_plans):
    repository = PlanRepository(db)
    repository.seed(seed_plans)
    return repository


def test_seed_is_idempotent(db, seed_plans):
    repository = PlanRepository(db)
    assert repository.seed(seed_plans) == len(seed_plans)
    assert repository.seed(seed_plans) == 0
    assert repository.count() == len(seed_plans)


def test_seed_skips_duplicate_ids_in_batch(db):
    plan = PlanRecord(id="dup", name="Uno")
    assert PlanRepository(db).seed([plan, plan]) == 1


def test_snapshot_is_complete_and_ordered(repo, seed_plans):
    snapshot = repo.snapshot()
    assert len(snapshot) == len(seed_plans)
    assert [p.id for p in snapshot] == sorted(p.id for p in seed_plans)


def test_get(repo):
    plan = repo.get("plan_poblado_1")
    assert plan.name == "Rooftop Sunset"
    assert plan.rating == 4.8
    assert plan.tags == ["Destacado", "Atardecer"]
    assert repo.get("missing") is None


def test_insert(repo):
    record = PlanRecord(id="plan_new", name="Jardín Botánico", category="Naturaleza", tags=["Gratis", "Familia"])
    repo.insert(record)
    assert repo.get("plan_new") == record
    with pytest.raises(ValueError):
        repo.insert(record)


def test_update(repo, db):
    updated = repo.update("plan_poblado_1", rating=4.9, tags=["Top"])
    assert updated.rating == 4.9
    assert updated.tags == ["Top"]
    assert db.get(Plan, "plan_poblado_1").tags == "Top"
    assert repo.update("missing", name="x") is None


def test_update_rejects_unknown_fields(repo):
    with pytest.raises(ValueError):
        repo.update("plan_poblado_1", price=10)


def test_update_rejects_invalid_values(repo):
    with pytest.raises(ValueError):
        repo.update("plan_poblado_1", rating=7)
    assert repo.get("plan_poblado_1").rating == 4.8


def test_repository_requires_session():
    with pytest.raises(ValueError):
        PlanRepository(None)


def test_catalog_snapshot_without_db():
    assert get_catalog_snapshot(None) == []


def test_catalog_snapshot_from_db(repo, db):
    assert get_catalog_snapshot(db) == repo.snapshot()


def test_load_seed_catalog_skips_invalid(tmp_path):
    path = tmp_path / "plans.json"
    path.write_text(json.dumps([
        {"id": "a", "name": "Bueno", "rating": 4.0},
        {"id": "b", "name": "Malo", "rating": 9},
        {"name": "Sin id"},
        "no es un objeto",
    ]), encoding="utf-8")
    records = load_seed_catalog(str(path))
    assert [r.id for r in records] == ["a"]


def test_load_seed_catalog_requires_array(tmp_path):
    path = tmp_path / "plans.json"
    path.write_text(json.dumps({"id": "a"}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_seed_catalog(str(path))


def test_seed_catalog_from_file(db):
    added = seed_catalog(db, settings.catalog_seed_path)
    assert added == 14
    assert PlanRepository(db).count() == 14
