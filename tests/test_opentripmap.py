import pytest

from fakes import FakeResp, FakeSession, always, sequence
from travel_explorer.models import PlaceShape
from travel_explorer.providers import opentripmap_provider as otm


def test_normalize_flat_list_drops_malformed_and_sorts():
    payload = [
        {"name": "Far", "xid": "N2", "dist": 900, "point": {"lat": 1.0, "lon": 2.0}},
        {"name": "Near", "xid": "N1", "dist": 100, "point": {"lat": 1.1, "lon": 2.1}},
        {"name": "", "point": {"lat": 1.0, "lon": 2.0}},
        {"name": "No point"},
        {"name": "Bad coords", "point": {"lat": "x", "lon": 2.0}},
        "garbage",
    ]

    places = otm.normalize_places(payload)

    assert [p.name for p in places] == ["Near", "Far"]
    assert places[0].external_id == "N1"
    assert places[0].point.lat == 1.1


def test_normalize_feature_collection():
    payload = {"features": [
        {"geometry": {"coordinates": [13.4, 52.5]}, "properties": {"name": "Gate", "xid": "W1", "dist": 50}},
        {"geometry": {"coordinates": [13.4]}, "properties": {"name": "Short"}},
        {"geometry": {"coordinates": [13.5, 52.6]}, "properties": {}},
    ]}

    places = otm.normalize_places(payload)

    assert len(places) == 1
    assert places[0].name == "Gate"
    assert places[0].point.lat == 52.5
    assert places[0].point.lon == 13.4


def test_missing_distance_sorts_first():
    payload = [
        {"name": "B", "dist": 10, "point": {"lat": 0, "lon": 0}},
        {"name": "A", "point": {"lat": 0, "lon": 0}},
    ]
    assert [p.name for p in otm.normalize_places(payload)] == ["A", "B"]


def test_classify_raw_place():
    assert otm.classify_raw_place({"point": {"lat": 0, "lon": 0}}) is PlaceShape.POINT
    assert otm.classify_raw_place({"geometry": {"coordinates": [0, 0]}}) is PlaceShape.GEOMETRY
    assert otm.classify_raw_place({"name": "x"}) is None
    assert otm.classify_raw_place(None) is None


def test_unreadable_payload_normalizes_to_empty():
    assert otm.normalize_places(None) == []
    assert otm.normalize_places({"error": "x"}) == []


def test_candidate_order_and_clamping():
    cands = otm.build_place_candidates(48.85, 2.35, 10000, "k")

    assert [c.label for c in cands] == ["radius-sights", "radius-any", "bbox-any"]
    assert cands[0].params["radius"] == "3000"
    assert cands[0].params["kinds"] == otm.SIGHTSEEING_KINDS
    assert cands[1].params["radius"] == "5000"
    assert "kinds" not in cands[1].params
    for c in cands:
        assert c.params["rate"] == "2"
        assert c.params["limit"] == "30"
        assert c.params["apikey"] == "k"


def test_small_radius_clamps_up():
    cands = otm.build_place_candidates(0, 0, 100, "k")
    assert cands[0].params["radius"] == "500"
    assert cands[1].params["radius"] == "1000"


def test_bbox_half_span_bounds():
    assert otm.bbox_half_span(100) == 0.01
    assert otm.bbox_half_span(3000) == pytest.approx(0.025)
    assert otm.bbox_half_span(100000) == 0.08


@pytest.mark.asyncio
async def test_no_key_makes_no_request():
    session = always([])
    assert await otm.discover_places(1.0, 2.0, 3000, api_key=None, session=session) == []
    assert session.calls == []


@pytest.mark.asyncio
async def test_falls_back_to_bbox_when_radius_queries_are_empty():
    def handler(url, params):
        if url == otm.BBOX_URL:
            return {"features": [
                {"geometry": {"coordinates": [2.0, 1.0]}, "properties": {"name": "Square", "xid": "Q"}},
            ]}
        return []

    session = FakeSession(handler)
    places = await otm.discover_places(1.0, 2.0, 3000, api_key="k", session=session)

    assert [p.name for p in places] == ["Square"]
    assert session.urls() == [otm.RADIUS_URL, otm.RADIUS_URL, otm.BBOX_URL]


@pytest.mark.asyncio
async def test_detail_parses_preview_and_extract():
    session = always({
        "preview": {"source": "https://img.test/a.jpg"},
        "wikipedia_extracts": {"text": "A tower."},
        "info": {"descr": "ignored"},
    })

    detail = await otm.fetch_place_detail("W1", api_key="k", session=session)

    assert detail.preview_image == "https://img.test/a.jpg"
    assert detail.description == "A tower."
    assert session.calls[0]["url"].endswith("/xid/W1")


@pytest.mark.asyncio
async def test_detail_description_falls_back_to_info_then_city():
    info = await otm.fetch_place_detail("X", "k", session=always({"info": {"descr": "Info text"}}))
    city = await otm.fetch_place_detail("X", "k", session=always({"address": {"city": "Paris"}}))
    assert info.description == "Info text"
    assert city.description == "Paris"


@pytest.mark.asyncio
async def test_detail_404_yields_empty_detail():
    detail = await otm.fetch_place_detail("W1", api_key="k", session=always(FakeResp(status=404)))
    assert detail.is_empty
    assert detail.external_id == "W1"


@pytest.mark.asyncio
async def test_detail_without_id_or_key_skips_request():
    session = sequence()
    assert (await otm.fetch_place_detail(None, "k", session=session)).is_empty
    assert (await otm.fetch_place_detail("W1", None, session=session)).is_empty
    assert session.calls == []


def test_non_string_name_drops_only_that_item():
    payload = [
        {"name": 123, "dist": 5, "point": {"lat": 1.0, "lon": 2.0}},
        {"name": ["x"], "dist": 6, "point": {"lat": 1.0, "lon": 2.0}},
        {"name": "Good", "dist": 7, "point": {"lat": 1.0, "lon": 2.0}},
    ]
    assert [p.name for p in otm.normalize_places(payload)] == ["Good"]


def test_non_dict_properties_drops_only_that_feature():
    payload = {"features": [
        {"geometry": {"coordinates": [2.0, 1.0]}, "properties": ["oops"]},
        {"geometry": {"coordinates": [2.0, 1.0]}, "properties": {"name": 7}},
        {"geometry": {"coordinates": [2.0, 1.0]}, "properties": {"name": "Good"}},
    ]}
    assert [p.name for p in otm.normalize_places(payload)] == ["Good"]


@pytest.mark.asyncio
async def test_one_malformed_item_keeps_the_narrow_candidate():
    session = always([
        {"name": 123, "point": {"lat": 1.0, "lon": 2.0}},
        {"name": "Good", "xid": "G", "point": {"lat": 1.0, "lon": 2.0}},
    ])
    places = await otm.discover_places(1.0, 2.0, 3000, api_key="k", session=session)
    assert [p.name for p in places] == ["Good"]
    assert len(session.calls) == 1
