# =============================================================================
# SQLite Storage Tests
# =============================================================================

import pytest

from nbayes import NBayes
from nbayes.storage import Database, Repository


@pytest.fixture
async def repo(temp_dir):
    """Repository on a fresh database in a temporary directory."""
    db = Database(temp_dir / "nbayes.db")
    await db.connect()
    yield Repository(db)
    await db.close()


class TestDatabase:
    def test_conn_before_connect(self, temp_dir):
        db = Database(temp_dir / "x.db")
        with pytest.raises(RuntimeError):
            db.conn

    @pytest.mark.asyncio
    async def test_context_manager_creates_schema(self, temp_dir):
        path = temp_dir / "sub" / "x.db"
        async with Database(path) as db:
            async with db.conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
            ) as cursor:
                tables = {row[0] for row in await cursor.fetchall()}
        assert {"categories", "tokens", "vocabulary", "settings", "schema_version"} <= tables
        assert path.exists()

    @pytest.mark.asyncio
    async def test_reconnect_keeps_data(self, temp_dir):
        path = temp_dir / "x.db"
        async with Database(path) as db:
            await Repository(db).upsert("spam", "cheap")
        async with Database(path) as db:
            assert await Repository(db).category_names() == ["spam"]


class TestRowOperations:
    @pytest.mark.asyncio
    async def test_upsert_inserts_then_increments(self, repo):
        await repo.upsert("spam", "cheap")
        await repo.upsert("spam", "cheap")
        await repo.upsert("spam", 42)
        record = await repo.category_record("spam")
        assert record.tokens == {"cheap": 2, 42: 1}
        assert record.total_tokens == 3

    @pytest.mark.asyncio
    async def test_decrement_and_delete(self, repo):
        await repo.upsert("spam", "cheap")
        await repo.upsert("spam", "cheap")
        assert await repo.decrement("spam", "cheap") == 1
        assert await repo.decrement("spam", "missing") is None
        await repo.delete("spam", "cheap")
        record = await repo.category_record("spam")
        assert record.tokens == {}

    @pytest.mark.asyncio
    async def test_keys_and_count(self, repo):
        await repo.upsert("spam", "cheap")
        await repo.upsert("ham", "cheap")
        await repo.upsert("ham", "lunch")
        assert sorted(await repo.token_keys()) == ["cheap", "lunch"]
        assert await repo.token_count() == 2
        assert await repo.probability_data() == (2, 2, 3)

    @pytest.mark.asyncio
    async def test_examples_and_category_lifecycle(self, repo):
        await repo.increment_examples("spam")
        await repo.increment_examples("spam")
        await repo.upsert("spam", "cheap")
        assert await repo.has_category("spam")
        assert (await repo.category_record("spam")).examples == 2

        await repo.decrement_examples("spam")
        assert await repo.has_category("spam")
        await repo.decrement_examples("spam")
        assert not await repo.has_category("spam")
        assert await repo.token_count() == 0

    @pytest.mark.asyncio
    async def test_delete_category(self, repo):
        await repo.upsert("spam", "cheap")
        await repo.upsert("ham", "lunch")
        assert await repo.delete_category("spam") == ["ham"]
        assert await repo.delete_category("missing") == ["ham"]
        assert await repo.token_keys() == ["lunch"]

    @pytest.mark.asyncio
    async def test_missing_category_record(self, repo):
        assert await repo.category_record("nope") is None


class TestClassifierPersistence:
    @pytest.mark.asyncio
    async def test_save_and_load(self, repo, trained):
        trained.train(["a", ("bi", "gram"), 7], "classA")
        await repo.save_classifier(trained)

        restored = await repo.load_classifier()
        assert restored.data.categories() == ["classA", "classB"]
        assert restored.data.get("classA").examples == 2
        assert restored.data.count_of("classA", ("bi", "gram")) == 1
        assert restored.classify(["a", 7]) == trained.classify(["a", 7])

    @pytest.mark.asyncio
    async def test_save_replaces_previous_state(self, repo, trained):
        await repo.save_classifier(trained)
        other = NBayes(k=2, binarized=True)
        other.train(["z"], "only")
        await repo.save_classifier(other)

        restored = await repo.load_classifier()
        assert restored.data.categories() == ["only"]
        assert restored.k == 2
        assert restored.binarized

    @pytest.mark.asyncio
    async def test_load_empty_database(self, repo):
        restored = await repo.load_classifier()
        assert restored.data.categories() == []
        assert restored.k == 1

    @pytest.mark.asyncio
    async def test_vocabulary_preserved_exactly(self, repo, nbayes):
        nbayes.train(["a", "b"], "x")
        nbayes.train(["a"], "y")
        nbayes.train(["a"], "y")
        nbayes.untrain(["a"], "y")
        await repo.save_classifier(nbayes)
        restored = await repo.load_classifier()
        assert set(restored.vocab) == {"b"}
        assert restored.classify(["a"]) == nbayes.classify(["a"])

    @pytest.mark.asyncio
    async def test_load_skips_category_with_no_examples(self, repo):
        await repo.upsert("spam", "a")
        restored = await repo.load_classifier()
        assert restored.data.categories() == []

    @pytest.mark.asyncio
    async def test_load_ignores_upserted_category_beside_trained_one(self, repo):
        await repo.increment_examples("ham")
        await repo.upsert("ham", "b")
        await repo.upsert("spam", "a")
        restored = await repo.load_classifier()
        assert restored.data.categories() == ["ham"]

    @pytest.mark.asyncio
    async def test_load_skips_rows_decremented_to_zero(self, repo):
        await repo.increment_examples("ham")
        await repo.upsert("ham", "a")
        await repo.upsert("ham", "b")
        assert await repo.decrement("ham", "a") == 0
        restored = await repo.load_classifier()
        assert restored.data.count_of("ham", "a") == 0
        assert restored.data.get("ham").total_tokens == 1
