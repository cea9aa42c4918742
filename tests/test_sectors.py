import pytest
from pydantic import ValidationError

from prospect.errors import IncompleteSelection, LabelingError, MissingRequiredSection, SectorIndexError
from prospect.labeling.sector_set import SectorSet
from prospect.labeling.validator import validate_sector
from prospect.schema.sectors import SectorKey, sector_key


PZ_PM = sector_key("base", "left", "peripheral", "posterior_medial")
TZ_A = sector_key("mid", "right", "transition", "anterior")
CZ_L = sector_key("base", "left", "central")
AFS_R = sector_key("apex", "right", "anterior_fibromuscular_stroma")


def test_sector_key_structural_equality():
    assert sector_key("base", "left", "central") == SectorKey(region="base", side="left", zone="central")
    assert PZ_PM != sector_key("base", "left", "peripheral", "posterior_lateral")
    assert hash(CZ_L) == hash(sector_key("base", "left", "central", None))


def test_sector_key_rejects_broken_invariant():
    with pytest.raises(ValidationError):
        SectorKey(region="base", side="left", zone="central", section="anterior")
    with pytest.raises(ValidationError):
        SectorKey(region="base", side="left", zone="transition")


def test_sector_key_is_frozen():
    with pytest.raises(ValidationError):
        PZ_PM.side = "right"


def test_sector_label():
    assert PZ_PM.label() == "B-L-PERIPHERAL-posterior_medial"
    assert AFS_R.label() == "A-R-ANTERIOR_FIBROMUSCULAR_STROMA"


# ------------------------- validator -------------------------

def test_validate_central_drops_section():
    key = validate_sector("base", "left", "central", "posterior")
    assert key.section is None
    assert key == CZ_L


def test_validate_afs_drops_section():
    key = validate_sector("mid", "left", "anterior_fibromuscular_stroma", "anterior")
    assert key.section is None


def test_validate_peripheral_without_section():
    with pytest.raises(MissingRequiredSection):
        validate_sector("base", "left", "peripheral", "")
    with pytest.raises(MissingRequiredSection):
        validate_sector("base", "left", "transition", None)
    with pytest.raises(MissingRequiredSection):
        validate_sector("base", "left", "transition", "lateral")


@pytest.mark.parametrize(
    "region,side,zone,field",
    [
        ("", "left", "central", "region"),
        ("top", "left", "central", "region"),
        ("base", None, "central", "side"),
        ("base", "left", "", "zone"),
        # incomplete wins over a missing section
        ("", "left", "peripheral", "region"),
    ],
)
def test_validate_incomplete(region, side, zone, field):
    with pytest.raises(IncompleteSelection) as exc:
        validate_sector(region, side, zone, None)
    assert exc.value.field == field


def test_validate_strips_whitespace():
    assert validate_sector(" base ", "left", "peripheral ", " posterior_medial") == PZ_PM


# ------------------------- sector set -------------------------

def test_toggle_twice_restores():
    for start in ([], [PZ_PM], [PZ_PM, TZ_A, CZ_L]):
        for key in (PZ_PM, TZ_A, AFS_R):
            s = SectorSet(start)
            s.toggle(key)
            s.toggle(key)
            if key in start:
                # re-added at the end
                assert set(s.as_list()) == set(start)
                assert s[-1] == key
            else:
                assert s.as_list() == start


def test_toggle_twice_restores_last_entry_exactly():
    s = SectorSet([PZ_PM, TZ_A])
    s.toggle(TZ_A)
    s.toggle(TZ_A)
    assert s == SectorSet([PZ_PM, TZ_A])


def test_toggle_appends_and_removes():
    s = SectorSet()
    assert s.toggle(PZ_PM) is True
    assert s.toggle(TZ_A) is True
    assert s.as_list() == [PZ_PM, TZ_A]
    assert s.toggle(sector_key("base", "left", "peripheral", "posterior_medial")) is False
    assert s.as_list() == [TZ_A]


def test_toggle_never_duplicates():
    s = SectorSet([PZ_PM, TZ_A])
    for key in (PZ_PM, CZ_L, TZ_A, CZ_L, AFS_R, PZ_PM):
        s.toggle(key)
        keys = s.as_list()
        assert len(set(keys)) == len(keys)


def test_add_if_absent():
    s = SectorSet()
    assert s.add_if_absent(CZ_L) is True
    assert s.add_if_absent(sector_key("base", "left", "central", "anterior")) is False
    assert len(s) == 1


def test_constructor_dedupes_in_order():
    s = SectorSet([TZ_A, PZ_PM, TZ_A])
    assert s.as_list() == [TZ_A, PZ_PM]


def test_remove_at():
    s = SectorSet([PZ_PM, TZ_A, CZ_L])
    assert s.remove_at(1) == TZ_A
    assert s.as_list() == [PZ_PM, CZ_L]
    with pytest.raises(IndexError):
        s.remove_at(2)
    with pytest.raises(IndexError):
        s.remove_at(-1)
    assert len(s) == 2
    with pytest.raises(SectorIndexError) as exc:
        s.remove_at(5)
    assert isinstance(exc.value, LabelingError)
