import pytest

from prospect.errors import InvalidValue, LesionNotFound, UnknownField
from prospect.labeling.lesions import LesionStore
from prospect.labeling.sector_set import SectorSet
from prospect.schema.sectors import sector_key

PZ_PM = sector_key("base", "left", "peripheral", "posterior_medial")
CZ_L = sector_key("base", "left", "central")


def test_add_on_empty_store_gives_id_1():
    store = LesionStore()
    lesion = store.add()
    assert lesion.id == 1
    assert lesion.pirads is None and lesion.size is None
    assert len(lesion.sectors) == 0


def test_removing_highest_id_frees_it():
    store = LesionStore()
    for _ in range(3):
        store.add()
    assert store.ids() == [1, 2, 3]
    store.remove(3)
    assert store.add().id == 3


def test_gap_below_max_is_not_filled():
    store = LesionStore()
    for _ in range(3):
        store.add()
    store.remove(2)
    assert store.add().id == 4
    assert store.ids() == [1, 3, 4]


def test_emptied_store_restarts_at_1():
    store = LesionStore()
    store.add()
    store.add()
    store.remove(1)
    store.remove(2)
    assert store.add().id == 1


def test_remove_missing_is_noop():
    store = LesionStore()
    store.add()
    store.remove(42)
    store.remove(42)
    assert store.ids() == [1]


def test_remove_discards_sectors():
    store = LesionStore()
    lesion = store.add()
    lesion.sectors.toggle(PZ_PM)
    store.remove(1)
    assert store.find(1) is None
    assert len(store.add().sectors) == 0


def test_find():
    store = LesionStore()
    first = store.add()
    assert store.find(1) is first
    assert store.find(2) is None


def test_update_merges_fields():
    store = LesionStore(size_field="maximum_diameter")
    store.add()
    store.update(1, pirads=4)
    lesion = store.update(1, maximum_diameter=12.5)
    assert lesion.pirads == 4
    assert lesion.size == 12.5
    store.update(1, size=None)
    assert store.find(1).size is None
    assert store.find(1).pirads == 4


def test_update_sectors_dedupes():
    store = LesionStore()
    store.add()
    lesion = store.update(1, sectors=[PZ_PM, CZ_L, PZ_PM])
    assert isinstance(lesion.sectors, SectorSet)
    assert lesion.sectors.as_list() == [PZ_PM, CZ_L]


def test_update_missing_id():
    store = LesionStore()
    with pytest.raises(LesionNotFound):
        store.update(1, pirads=3)


def test_update_unknown_field():
    store = LesionStore(size_field="volume")
    store.add()
    with pytest.raises(UnknownField):
        store.update(1, maximum_diameter=3.0)


@pytest.mark.parametrize(
    "fields",
    [{"pirads": 0}, {"pirads": 6}, {"size": -1.0}, {"size": float("inf")}, {"size": float("nan")}, {"sectors": ["base-left-cz"]}],
)
def test_invalid_update_changes_nothing(fields):
    store = LesionStore()
    lesion = store.add()
    store.update(1, pirads=2, size=3.0, sectors=[CZ_L])
    with pytest.raises(InvalidValue):
        store.update(1, **fields)
    assert (lesion.pirads, lesion.size, lesion.sectors.as_list()) == (2, 3.0, [CZ_L])


def test_partial_failure_applies_nothing():
    store = LesionStore()
    lesion = store.add()
    with pytest.raises(InvalidValue):
        store.update(1, size=5.0, pirads=9)
    assert lesion.size is None
