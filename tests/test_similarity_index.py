# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: test_similarity_index.py
# -----------------------------------------------------------------------------
import json

import pytest

from embedding.TokenHashEmbedder import TokenHashEmbedder
from index.IndexItem import IndexItem
from index.SimilarityIndex import SimilarityIndex
from metrics.DistanceMetrics import CosineSimilarity, DotProduct, EuclideanDistance
from persistence.BinaryStore import BinaryStore
from persistence.JsonStore import JsonStore
from utility.errors import (
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingError,
    IndexNotReadyError,
)


# ---------- lifecycle ----------

@pytest.mark.asyncio
async def test_create_discovers_dimension(cfg, make_embedder):
    embedder = make_embedder(dimension=5)
    index = await SimilarityIndex.create(name="dims", embedder=embedder, cfg=cfg)

    assert index.dimension == 5
    assert index.is_ready
    assert embedder.calls == [SimilarityIndex.PROBE_TEXT]


@pytest.mark.asyncio
async def test_create_uses_config_defaults(cfg):
    index = await SimilarityIndex.create(cfg=cfg)

    assert index.name == cfg.index_name
    assert index.dimension == cfg.embedding_dim
    assert isinstance(index.metric, CosineSimilarity)
    assert isinstance(index.vector_store, JsonStore)


@pytest.mark.asyncio
async def test_discovery_failure_is_fatal(cfg, make_embedder):
    with pytest.raises(EmbeddingError):
        await SimilarityIndex.create(embedder=make_embedder(none_for=[SimilarityIndex.PROBE_TEXT]), cfg=cfg)
    with pytest.raises(EmbeddingError):
        await SimilarityIndex.create(embedder=make_embedder(raise_for=[SimilarityIndex.PROBE_TEXT]), cfg=cfg)


@pytest.mark.asyncio
async def test_uninitialised_index_refuses_work(cfg, make_embedder):
    index = SimilarityIndex(embedder=make_embedder(), cfg=cfg)

    with pytest.raises(IndexNotReadyError):
        await index.add_item("1", "text", {})
    with pytest.raises(IndexNotReadyError):
        await index.search("text")

    await index.discover_dimension()
    await index.add_item("1", "text", {})
    assert len(index) == 1


# ---------- embeddings ----------

@pytest.mark.asyncio
async def test_supplied_embedding_used_when_dimension_matches(cfg, make_embedder):
    embedder = make_embedder()
    index = await SimilarityIndex.create(embedder=embedder, cfg=cfg)

    item = await index.add_item("1", "Example text", {"source": "test source"}, embedding=[0.1, 0.2, 0.3])

    assert item.embedding == [0.1, 0.2, 0.3]
    assert embedder.calls == [SimilarityIndex.PROBE_TEXT]


@pytest.mark.asyncio
async def test_wrong_length_embedding_is_re_encoded(cfg, make_embedder):
    embedder = make_embedder({"Example text": [0.0, 1.0, 0.0]})
    index = await SimilarityIndex.create(embedder=embedder, cfg=cfg)

    item = await index.add_item("1", "Example text", {}, embedding=[0.1, 0.2])

    assert item.embedding == [0.0, 1.0, 0.0]
    assert "Example text" in embedder.calls


@pytest.mark.asyncio
async def test_encode_failure_gives_zero_vector(cfg, make_embedder):
    embedder = make_embedder(none_for=["nothing"], raise_for=["boom"])
    index = await SimilarityIndex.create(embedder=embedder, cfg=cfg)

    assert (await index.add_item("1", "nothing", {})).embedding == [0.0, 0.0, 0.0]
    assert (await index.add_item("2", "boom", {})).embedding == [0.0, 0.0, 0.0]
    assert len(index) == 2


# ---------- batch add ----------

@pytest.mark.asyncio
async def test_add_items_mismatched_lengths_adds_nothing(cfg, make_embedder):
    index = await SimilarityIndex.create(embedder=make_embedder(), cfg=cfg)

    with pytest.raises(ConfigurationError):
        await index.add_items(["1", "2"], ["a"], [{}, {}])
    with pytest.raises(ConfigurationError):
        await index.add_items(["1"], ["a"], [{}], embeddings=[[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])

    assert len(index) == 0


@pytest.mark.asyncio
async def test_add_items_bounded_concurrency_and_progress(tmp_path, make_embedder):
    from config.Config import Config

    cfg = Config(store_dir=str(tmp_path), max_concurrency=3)
    embedder = make_embedder(delay=0.01)
    index = await SimilarityIndex.create(embedder=embedder, cfg=cfg)

    progressed = []
    ids = [f"id{i}" for i in range(12)]
    added = await index.add_items(
        ids,
        [f"text {i}" for i in range(12)],
        [{"n": str(i)} for i in range(12)],
        on_progress=progressed.append,
    )

    assert [item.id for item in index.items] == ids
    assert [item.id for item in added] == ids
    assert sorted(progressed) == sorted(ids)
    assert embedder.max_in_flight <= 3


@pytest.mark.asyncio
async def test_add_items_with_partial_failure(cfg, make_embedder):
    index = await SimilarityIndex.create(embedder=make_embedder(none_for=["bad"]), cfg=cfg)

    await index.add_items(["1", "2"], ["good", "bad"], [{}, {}], embeddings=[None, None])

    assert index.get_item("1").embedding == [1.0, 0.0, 0.0]
    assert index.get_item("2").embedding == [0.0, 0.0, 0.0]


# ---------- search ----------

@pytest.mark.asyncio
async def test_three_sentence_cosine_scenario(cfg):
    index = await SimilarityIndex.create(
        embedder=TokenHashEmbedder(dimension=384), metric=CosineSimilarity(), cfg=cfg
    )

    await index.add_items(
        ["1", "2", "3"],
        [
            "This is a test sentence",
            "This is also a test sentence",
            "Junk words which should score low",
        ],
        [{}, {}, {}],
    )

    results = await index.search("a test sentence", top_k=3)

    assert {r.id for r in results[:2]} == {"1", "2"}
    assert results[2].id == "3"
    assert results[1].score > results[2].score


@pytest.mark.asyncio
async def test_search_returns_min_k_n(cfg, make_embedder):
    vectors = {f"t{i}": [float(i), 1.0, 0.0] for i in range(6)}
    index = await SimilarityIndex.create(embedder=make_embedder(vectors), cfg=cfg)
    await index.add_items(list(vectors), list(vectors), [{}] * 6)

    assert len(await index.search("t1", top_k=3)) == 3
    assert len(await index.search("t1", top_k=50)) == 6
    assert len(await index.search("t1")) == cfg.default_top_k


@pytest.mark.asyncio
async def test_search_metric_override_is_per_call(cfg, make_embedder):
    vectors = {"far": [10.0, 0.0, 0.0], "near": [1.0, 0.0, 0.0], "q": [1.0, 0.0, 0.0]}
    index = await SimilarityIndex.create(embedder=make_embedder(vectors), metric=DotProduct(), cfg=cfg)
    await index.add_items(["far", "near"], ["far", "near"], [{}, {}])

    dot = await index.search("q", top_k=2)
    euclid = await index.search("q", top_k=2, metric=EuclideanDistance())
    again = await index.search("q", top_k=2)

    assert [r.id for r in dot] == ["far", "near"]
    assert [r.id for r in euclid] == ["near", "far"]
    assert euclid[0].score == pytest.approx(0.0)
    assert [r.id for r in again] == ["far", "near"]
    assert isinstance(index.metric, DotProduct)


@pytest.mark.asyncio
async def test_search_with_duplicate_ids_maps_each_position(cfg, make_embedder):
    vectors = {"a": [1.0, 0.0, 0.0], "b": [0.0, 1.0, 0.0]}
    index = await SimilarityIndex.create(embedder=make_embedder(vectors), cfg=cfg)
    await index.add_items(["dup", "dup"], ["a", "b"], [{}, {}])

    results = await index.search("b", top_k=2)

    assert [r.text for r in results] == ["b", "a"]


@pytest.mark.asyncio
async def test_search_query_failure_gives_empty(cfg, make_embedder):
    index = await SimilarityIndex.create(embedder=make_embedder(none_for=["q"], raise_for=["r"]), cfg=cfg)
    await index.add_item("1", "text", {})

    assert await index.search("q") == []
    assert await index.search("r") == []


@pytest.mark.asyncio
async def test_search_wrong_length_query_vector_gives_empty(cfg, make_embedder):
    embedder = make_embedder({"empty": [], "short": [1.0, 0.0]})
    index = await SimilarityIndex.create(embedder=embedder, cfg=cfg)
    await index.add_item("a", "first", {})
    await index.add_item("b", "second", {})

    assert await index.search("empty", 2) == []
    assert await index.search("short", 2) == []
    assert len(await index.search("first", 2)) == 2


@pytest.mark.asyncio
async def test_search_empty_index(cfg, make_embedder):
    index = await SimilarityIndex.create(embedder=make_embedder(), cfg=cfg)
    assert await index.search("anything") == []


# ---------- read / update / delete ----------

@pytest.mark.asyncio
async def test_get_item_and_sample(cfg, make_embedder):
    index = await SimilarityIndex.create(embedder=make_embedder(), cfg=cfg)
    await index.add_items(["1", "2", "1"], ["first", "second", "third"], [{}, {}, {}])

    assert index.get_item("1").text == "first"
    assert index.get_item("missing") is None
    assert [i.id for i in index.sample(2)] == ["1", "2"]
    assert len(index.sample(10)) == 3


@pytest.mark.asyncio
async def test_update_item(cfg, make_embedder):
    index = await SimilarityIndex.create(embedder=make_embedder(), cfg=cfg)
    await index.add_item("1", "old", {"k": "v"})

    assert index.update_item("1", text="new", embedding=[0.0, 0.0, 1.0], metadata={"k": "w"})
    item = index.get_item("1")
    assert (item.text, item.embedding, item.metadata) == ("new", [0.0, 0.0, 1.0], {"k": "w"})

    assert index.update_item("missing", text="x") is False


@pytest.mark.asyncio
async def test_update_item_wrong_dimension_is_fatal(cfg, make_embedder):
    index = await SimilarityIndex.create(embedder=make_embedder(), cfg=cfg)
    await index.add_item("1", "text", {})

    with pytest.raises(DimensionMismatchError):
        index.update_item("1", embedding=[1.0, 2.0])
    assert index.get_item("1").embedding == [1.0, 0.0, 0.0]


@pytest.mark.asyncio
async def test_remove_item_and_remove_all(cfg, make_embedder):
    index = await SimilarityIndex.create(embedder=make_embedder(), cfg=cfg)
    await index.add_items(["1", "2", "1"], ["a", "b", "c"], [{}, {}, {}])

    assert index.remove_item("1") == 2
    assert [i.id for i in index.items] == ["2"]
    assert index.remove_item("1") == 0

    index.remove_all()
    assert len(index) == 0


@pytest.mark.asyncio
async def test_add_index_items_rejects_wrong_dimension(cfg, make_embedder):
    index = await SimilarityIndex.create(embedder=make_embedder(), cfg=cfg)

    with pytest.raises(DimensionMismatchError):
        index.add_index_items([IndexItem(id="x", text="t", embedding=[1.0], metadata={})])
    assert index.add_index_items([IndexItem(id="y", text="t", embedding=[1.0, 2.0, 3.0])]) == 1


@pytest.mark.asyncio
async def test_estimated_size_in_bytes(cfg, make_embedder):
    index = await SimilarityIndex.create(embedder=make_embedder(), cfg=cfg)
    await index.add_item("ab", "héllo", {"k": "vv"})

    # 2 (id) + 6 (utf-8 text) + 3 (metadata) + 3 * 4 (floats)
    assert index.estimated_size_in_bytes() == 23


# ---------- persistence ----------

@pytest.mark.asyncio
@pytest.mark.parametrize("store_cls", [JsonStore, BinaryStore])
async def test_save_and_load_into_fresh_index(cfg, make_embedder, store_cls):
    index = await SimilarityIndex.create(
        name="persisted", embedder=make_embedder(), vector_store=store_cls(), cfg=cfg
    )
    await index.add_item("1", "Example text", {"source": "test source"}, embedding=[0.1, 0.2, 0.3])
    path = index.save_index()

    assert path.parent == index.store_dir

    fresh = await SimilarityIndex.create(
        name="persisted", embedder=make_embedder(), vector_store=store_cls(), cfg=cfg
    )
    loaded = await fresh.load_index()

    assert loaded == index.items
    assert fresh.items == index.items


@pytest.mark.asyncio
async def test_load_appends_to_existing_items(cfg, make_embedder, tmp_path):
    index = await SimilarityIndex.create(name="shared", embedder=make_embedder(), cfg=cfg)
    await index.add_item("1", "one", {})
    index.save_index(tmp_path)

    other = await SimilarityIndex.create(name="shared", embedder=make_embedder(), cfg=cfg)
    await other.add_item("0", "zero", {})
    await other.load_index(tmp_path)

    assert [i.id for i in other.items] == ["0", "1"]


@pytest.mark.asyncio
async def test_load_with_no_match_returns_none(cfg, make_embedder, tmp_path):
    index = await SimilarityIndex.create(name="lonely", embedder=make_embedder(), cfg=cfg)

    assert await index.load_index(tmp_path) is None
    assert await index.load_index(tmp_path / "missing") is None


@pytest.mark.asyncio
async def test_export_index(cfg, make_embedder, tmp_path):
    embedder = make_embedder()
    index = await SimilarityIndex.create(name="exp", embedder=embedder, cfg=cfg)
    await index.add_item("1", "Example text", {"source": "test source"})

    path = index.export_index(tmp_path)

    assert path.name == f"exp_{embedder.__class__.__name__}_3.json"
    doc = json.loads(path.read_text(encoding="utf-8"))
    assert doc["vectors"][0]["metadata"] == {"text": "Example text", "source": "test source"}
